#!/usr/bin/env python3
"""
Bugcrowd Scope Fetcher

Walks the public engagement listing and reads each engagement's brief
document. The brief document URL is not in the listing: it sits in a JSON
map stored in the data-api-endpoints attribute of the program page.

    engagements.json?page=N  ->  /<briefUrl> (HTML)
                             ->  data-api-endpoints.engagementBriefApi.getBriefVersionDocument
                             ->  <brief>.json  ->  data.scope[].targets[]

Author: findtarget Team
License: MIT
"""

import json
import logging
import math
from typing import List

from .base import ScopeFetcher
from .config import BugcrowdConfig
from .errors import FetchError, ScopeResolutionError
from .html_scrape import find_attribute
from .scope_classifier import BugcrowdTarget, classify_bugcrowd_target

logger = logging.getLogger(__name__)

BUGCROWD_BASE_URL = 'https://bugcrowd.com'


class BugcrowdScopeFetcher(ScopeFetcher):
    """Emits in-scope Bugcrowd targets"""

    platform = 'bugcrowd'
    config: BugcrowdConfig

    def listing_url(self, page: int) -> str:
        """
        Build the engagement listing URL for a page.

        A reward of "points" selects VDPs; any other value is the minimum
        bounty amount.
        """
        url = f'{BUGCROWD_BASE_URL}/engagements.json?&page={page}'

        if self.config.category:
            url += f'&target_categories={self.config.category}'

        if self.config.reward:
            if self.config.reward == 'points':
                url += '&category=vdp'
            else:
                url += f'&category=bug_bounty&rewards_operator=gte&rewards_amount={self.config.reward}'

        return url

    def fetch_brief_document_url(self, program_url: str) -> str:
        """
        Resolve the brief document URL from a program page.

        Raises:
            FetchError: the page could not be fetched
            ScopeResolutionError: the page has no usable data-api-endpoints
        """
        page = self.client.get(program_url)

        container = self.config.container_class if self.config.require_container else None
        raw_endpoints = find_attribute(page.text, 'div', 'data-api-endpoints', container)
        if raw_endpoints is None:
            raise ScopeResolutionError('data-api-endpoints attribute not found')

        try:
            api_endpoints = json.loads(raw_endpoints)
        except ValueError as e:
            raise ScopeResolutionError(f'failed to parse data-api-endpoints JSON: {e}')

        engagement_brief = api_endpoints.get('engagementBriefApi') if isinstance(api_endpoints, dict) else None
        brief_document = engagement_brief.get('getBriefVersionDocument') if isinstance(engagement_brief, dict) else None
        if not brief_document or not isinstance(brief_document, str):
            raise ScopeResolutionError('getBriefVersionDocument not found in API endpoints')

        return BUGCROWD_BASE_URL + brief_document

    def fetch_scope_targets(self, brief_document_url: str) -> List[BugcrowdTarget]:
        """
        Fetch the brief document JSON and flatten its scope groups.

        Raises:
            FetchError: the document could not be fetched or decoded
            ScopeResolutionError: the document has an unexpected shape
        """
        brief = self.client.get_json(brief_document_url + '.json')

        data = brief.get('data') if isinstance(brief, dict) else None
        if not isinstance(data, dict):
            raise ScopeResolutionError('brief document has no data object')

        scope = data.get('scope') or []
        if not isinstance(scope, list):
            raise ScopeResolutionError('brief document scope is not a list')

        targets = []
        for item in scope:
            if not isinstance(item, dict) or not isinstance(item.get('targets'), list):
                continue
            for target in item['targets']:
                if isinstance(target, dict):
                    targets.append(BugcrowdTarget.from_dict(target))
        return targets

    def scan_program(self, program_url: str) -> bool:
        """
        Resolve, fetch and classify one program.

        Failures are reported to the skip sink and count as zero yield.

        Returns:
            True when at least one target was emitted
        """
        try:
            brief_document_url = self.fetch_brief_document_url(program_url)
            targets = self.fetch_scope_targets(brief_document_url)
        except (FetchError, ScopeResolutionError) as e:
            self.skip(program_url, e)
            return False

        yielded = False
        for target in targets:
            if self.config.category and self.config.category != target.category:
                continue
            if self.emit_targets(classify_bugcrowd_target(self.config.scope, target)):
                yielded = True
        return yielded

    def _run_include(self):
        for program_url in self.config.include:
            yielded = self.scan_program(program_url)
            if self.record_included_program(yielded):
                return

    def _run_paginated(self):
        page = 1
        total_pages = 1

        while page <= total_pages:
            url = self.listing_url(page)
            data = self.client.get_json(url)
            if not isinstance(data, dict):
                raise FetchError(f'unexpected Bugcrowd listing format on page {page}', url)

            if page == 1:
                total_count, total_pages = self._page_count(data.get('paginationMeta'), url)
                logger.info(f'[{self.platform}] {total_count} engagement(s) '
                            f'over {total_pages} page(s)')

            engagements = data.get('engagements') or []
            if not isinstance(engagements, list):
                raise FetchError(f'unexpected Bugcrowd engagements format on page {page}', url)
            logger.info(f'[{self.platform}] Page {page}/{total_pages}: {len(engagements)} engagement(s)')

            for engagement in engagements:
                if not isinstance(engagement, dict):
                    self.skip(f'<page {page}>', 'malformed engagement record')
                    continue

                brief_url = engagement.get('briefUrl')
                if not brief_url or not isinstance(brief_url, str):
                    self.skip(str(engagement.get('name') or '<unnamed>'), 'engagement has no briefUrl')
                    continue

                yielded = self.scan_program(BUGCROWD_BASE_URL + brief_url)
                if self.record_program(yielded):
                    return

            page += 1

    @staticmethod
    def _page_count(meta, url: str):
        """
        Read totalCount and limit from the first listing page.

        Returns:
            (totalCount, number of pages); a missing or zero limit means one page

        Raises:
            FetchError: the counters are not integers
        """
        if meta is None:
            meta = {}
        if not isinstance(meta, dict):
            raise FetchError('unexpected Bugcrowd paginationMeta format', url)

        try:
            total_count = int(meta.get('totalCount') or 0)
            limit = int(meta.get('limit') or 0)
        except (TypeError, ValueError):
            raise FetchError(f'invalid Bugcrowd pagination counters: {meta!r}', url)

        if limit > 0:
            return total_count, math.ceil(total_count / limit)
        return total_count, 1
