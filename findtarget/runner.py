#!/usr/bin/env python3
"""
Run controller.

Builds a scope fetcher for every platform present in the template and runs
them one after the other. Configuration problems abort the run before any
request; a platform failing mid-scan is logged and does not stop the next
platform.

Author: findtarget Team
License: MIT
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

import requests

from .base import Emitter, ScanStats, ScopeFetcher, SkipSink
from .bugcrowd_scope_fetcher import BugcrowdScopeFetcher
from .config import Credentials, RunConfig
from .errors import FindTargetError
from .hackerone_scope_fetcher import HackerOneScopeFetcher, build_client
from .http_client import FetchClient

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], requests.Session]


@dataclass
class RunResult:
    """Outcome of a run, per platform"""
    stats: Dict[str, ScanStats] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def targets_emitted(self) -> int:
        return sum(stats.targets_emitted for stats in self.stats.values())


def build_fetchers(config: RunConfig, credentials: Optional[Credentials] = None,
                   emit: Optional[Emitter] = None, on_skip: Optional[SkipSink] = None,
                   session_factory: SessionFactory = requests.Session) -> List[ScopeFetcher]:
    """
    Create the fetchers selected by the template, Bugcrowd first.

    Raises:
        ConfigError: invalid proxy or missing HackerOne credentials
    """
    if config.hackerone is not None:
        credentials = credentials or Credentials()
        credentials.require()

    fetchers = []

    if config.bugcrowd is not None:
        client = FetchClient(proxy=config.proxy, timeout=config.timeout,
                             session=session_factory())
        fetchers.append(BugcrowdScopeFetcher(config.bugcrowd, client, emit, on_skip))

    if config.hackerone is not None:
        client = build_client(credentials, proxy=config.proxy, timeout=config.timeout,
                              session=session_factory())
        fetchers.append(HackerOneScopeFetcher(config.hackerone, client, emit, on_skip))

    return fetchers


def run(config: RunConfig, credentials: Optional[Credentials] = None,
        emit: Optional[Emitter] = None, on_skip: Optional[SkipSink] = None,
        session_factory: SessionFactory = requests.Session) -> RunResult:
    """
    Scan every configured platform.

    Raises:
        ConfigError: before any request, when the configuration is unusable
    """
    fetchers = build_fetchers(config, credentials, emit, on_skip, session_factory)
    result = RunResult()

    if not fetchers:
        logger.warning('No platform configured under findtarget: (expected bugcrowd and/or hackerone)')
        return result

    for fetcher in fetchers:
        try:
            result.stats[fetcher.platform] = fetcher.run()
        except FindTargetError as e:
            logger.error(f'[{fetcher.platform}] Scan aborted: {e}')
            result.errors[fetcher.platform] = str(e)
            result.stats[fetcher.platform] = fetcher.stats
        finally:
            fetcher.client.close()

    return result
