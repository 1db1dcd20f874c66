#!/usr/bin/env python3
"""
HTTP Fetch Client

Thin wrapper around a requests.Session used by both platform scanners.
Requests are issued one at a time; every response is read and closed inside
the call that made it.

Author: findtarget Team
License: MIT
"""

import json
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import requests

from .config import DEFAULT_TIMEOUT, validate_proxy
from .errors import FetchError

logger = logging.getLogger(__name__)

USER_AGENT = 'findtarget/1.0'


@dataclass
class FetchResult:
    """Status and body of a completed request"""
    url: str
    status_code: int
    text: str

    def json(self):
        try:
            return json.loads(self.text)
        except ValueError as e:
            raise FetchError(f'failed to parse JSON from {self.url}: {e}', self.url, self.status_code)


class FetchClient:
    """
    GET-only client with optional SOCKS5 proxy and Basic Auth.

    Any status other than 200 is an error; there is no retry.
    """

    def __init__(self, proxy: str = '', timeout: float = DEFAULT_TIMEOUT,
                 auth: Optional[Tuple[str, str]] = None,
                 headers: Optional[Dict[str, str]] = None,
                 session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            proxy: socks5:// URL, validated before any request is made
            timeout: Per-request timeout in seconds
            auth: (username, token) for HTTP Basic Auth
            headers: Extra headers sent with every request
            session: Pre-built session (tests inject a mock here)

        Raises:
            ConfigError: when the proxy URL is invalid
        """
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({'User-Agent': USER_AGENT})

        if proxy:
            validate_proxy(proxy)
            self.session.proxies.update({'http': proxy, 'https': proxy})
            logger.debug(f'Routing requests through {proxy}')

        if auth:
            self.session.auth = auth

        if headers:
            self.session.headers.update(headers)

    def get(self, url: str) -> FetchResult:
        """
        Fetch a URL.

        Raises:
            FetchError: on network failure or a non-200 status
        """
        logger.debug(f'GET {url}')
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout:
            raise FetchError(f'timeout after {self.timeout}s fetching {url}', url)
        except requests.exceptions.RequestException as e:
            raise FetchError(f'failed to fetch {url}: {e}', url)

        try:
            if response.status_code != 200:
                raise FetchError(f'unexpected response from {url}: {response.status_code}',
                                 url, response.status_code)
            return FetchResult(url=url, status_code=response.status_code, text=response.text)
        except requests.exceptions.RequestException as e:
            raise FetchError(f'error reading response body from {url}: {e}', url)
        finally:
            response.close()

    def get_json(self, url: str):
        """Fetch a URL and decode its JSON body."""
        return self.get(url).json()

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
