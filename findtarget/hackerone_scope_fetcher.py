#!/usr/bin/env python3
"""
HackerOne Scope Fetcher

Retrieves program scope from HackerOne's authenticated hacker API.
Programs are discovered through /v1/hackers/programs (JSON:API, following
links.next) and their assets through the structured_scopes sub-resource.

Requires H1_USERNAME and H1_API_KEY; every request uses HTTP Basic Auth.

Author: findtarget Team
License: MIT
"""

import logging
import re
from typing import List, Optional, Tuple

import requests

from .base import ScopeFetcher
from .config import Credentials, HackerOneConfig
from .errors import FetchError
from .http_client import FetchClient
from .scope_classifier import HackerOneScope, classify_hackerone_scope

logger = logging.getLogger(__name__)

HACKERONE_BASE_URL = 'https://api.hackerone.com/v1/hackers/programs'
HANDLE_PATTERN = re.compile(r'https://hackerone\.com/([^?]+)')


def extract_handle(program_url: str) -> Optional[str]:
    """
    Get the program handle from a public program URL.

    Example:
        https://hackerone.com/security?type=team -> security
    """
    match = HANDLE_PATTERN.search(program_url)
    if not match:
        return None
    return match.group(1).rstrip('/') or None


def build_client(credentials: Credentials, proxy: str = '', timeout: float = 30,
                 session: Optional[requests.Session] = None) -> FetchClient:
    """
    Create a fetch client authenticated against the HackerOne API.

    Raises:
        ConfigError: when credentials are missing or the proxy is invalid
    """
    credentials.require()
    return FetchClient(
        proxy=proxy,
        timeout=timeout,
        auth=(credentials.h1_username, credentials.h1_api_key),
        headers={'Accept': 'application/json'},
        session=session,
    )


class HackerOneScopeFetcher(ScopeFetcher):
    """Emits in-scope HackerOne targets"""

    platform = 'hackerone'
    config: HackerOneConfig

    def run(self):
        if self.config.reward or self.config.category:
            logger.warning(f'[{self.platform}] reward and category filters are not supported '
                           f'for HackerOne and are ignored')
        return super().run()

    def fetch_programs(self, url: str) -> Tuple[List[str], str]:
        """
        Fetch one page of the program listing.

        Args:
            url: Listing page URL

        Returns:
            (program handles, next page URL or '')

        Raises:
            FetchError: the page could not be fetched or has an unexpected shape
        """
        result = self.client.get_json(url)
        if not isinstance(result, dict):
            raise FetchError('unexpected HackerOne program listing format', url)

        programs = result.get('data') or []
        if not isinstance(programs, list):
            raise FetchError('unexpected HackerOne program listing format', url)

        handles = []
        for program in programs:
            attrs = program.get('attributes') if isinstance(program, dict) else None
            handle = attrs.get('handle') if isinstance(attrs, dict) else None
            if handle and isinstance(handle, str):
                handles.append(handle)
            else:
                self.skip(f'<{url}>', 'malformed program record')

        links = result.get('links')
        next_url = links.get('next') if isinstance(links, dict) else None
        return handles, next_url if isinstance(next_url, str) else ''

    def fetch_structured_scopes(self, handle: str) -> List[HackerOneScope]:
        """
        Fetch the structured scopes of a program.

        Bodies mentioning neither URL nor WILDCARD cannot yield anything and
        are not decoded.

        Raises:
            FetchError: the request failed or the body is not valid JSON
        """
        url = f'{HACKERONE_BASE_URL}/{handle}/structured_scopes?page[size]=100'
        response = self.client.get(url)

        if 'URL' not in response.text and 'WILDCARD' not in response.text:
            logger.debug(f'[{self.platform}] {handle}: no URL or WILDCARD assets')
            return []

        data = response.json()
        if not isinstance(data, dict):
            raise FetchError(f'unexpected structured scopes format for {handle}', url)

        records = data.get('data') or []
        if not isinstance(records, list):
            raise FetchError(f'unexpected structured scopes format for {handle}', url)

        return [HackerOneScope.from_dict(scope) for scope in records if isinstance(scope, dict)]

    def scan_program(self, handle: str) -> bool:
        """
        Fetch and classify one program.

        Returns:
            True when at least one target was emitted
        """
        try:
            scopes = self.fetch_structured_scopes(handle)
        except FetchError as e:
            self.skip(handle, e)
            return False

        yielded = False
        for scope in scopes:
            targets = classify_hackerone_scope(self.config.scope, scope,
                                               all_includes_urls=self.config.all_includes_urls)
            if self.emit_targets(targets):
                yielded = True
        return yielded

    def _run_include(self):
        for program_url in self.config.include:
            handle = extract_handle(program_url)
            if not handle:
                self.skip(program_url, 'invalid HackerOne URL')
                continue

            logger.info(f'[{self.platform}] Program: {handle}')
            yielded = self.scan_program(handle)
            if self.record_included_program(yielded):
                return

    def _run_paginated(self):
        url = HACKERONE_BASE_URL
        page = 0

        while url:
            page += 1
            handles, url = self.fetch_programs(url)
            logger.info(f'[{self.platform}] Page {page}: {len(handles)} program(s)')

            for handle in handles:
                yielded = self.scan_program(handle)
                if self.record_program(yielded):
                    return
