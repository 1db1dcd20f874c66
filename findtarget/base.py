#!/usr/bin/env python3
"""
Base class shared by the platform scope fetchers.

Handles emitting targets, reporting skipped programs and the maxPrograms
cutoff so that Bugcrowd and HackerOne only implement discovery.

Author: findtarget Team
License: MIT
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from .config import IncludeCap, PlatformConfig
from .http_client import FetchClient

logger = logging.getLogger(__name__)

Emitter = Callable[[str], None]
SkipSink = Callable[[str, str], None]


def print_target(target: str):
    """Default emitter: one target per line on stdout"""
    print(target, flush=True)


def log_skip(program: str, reason: str):
    """Default skip sink"""
    logger.warning(f'Skipping {program}: {reason}')


@dataclass
class ScanStats:
    """Counters for a single scan; never shared between scans"""
    programs_scanned: int = 0
    programs_yielded: int = 0
    programs_skipped: int = 0
    targets_emitted: int = 0
    stopped_at_cap: bool = False


class ScopeFetcher(ABC):
    """
    Runs one platform scan in include mode or paginated mode.

    Subclasses implement _run_include() and _run_paginated(). Both return
    normally once the platform is exhausted or the cap is hit; listing
    failures propagate as FetchError.
    """

    platform = 'platform'

    def __init__(self, config: PlatformConfig, client: FetchClient,
                 emit: Optional[Emitter] = None, on_skip: Optional[SkipSink] = None):
        self.config = config
        self.client = client
        self.emit = emit or print_target
        self.on_skip = on_skip or log_skip
        self.stats = ScanStats()

    def run(self) -> ScanStats:
        """Scan the platform and return the counters for this run."""
        self.stats = ScanStats()

        if self.config.include:
            logger.info(f'[{self.platform}] Scanning {len(self.config.include)} included program(s)')
            self._run_include()
        else:
            logger.info(f'[{self.platform}] Discovering programs (scope={self.config.scope.value}, '
                        f'maxPrograms={self.config.max_programs or "unlimited"})')
            self._run_paginated()

        logger.info(f'[{self.platform}] {self.stats.targets_emitted} target(s) from '
                    f'{self.stats.programs_yielded}/{self.stats.programs_scanned} program(s), '
                    f'{self.stats.programs_skipped} skipped')
        return self.stats

    @abstractmethod
    def _run_include(self):
        """Scan only the programs listed in config.include."""

    @abstractmethod
    def _run_paginated(self):
        """Walk the platform listing page by page."""

    def emit_targets(self, targets: Iterable[str]) -> bool:
        """Write every target; True when at least one was written."""
        emitted = False
        for target in targets:
            self.emit(target)
            self.stats.targets_emitted += 1
            emitted = True
        return emitted

    def skip(self, program: str, reason):
        self.stats.programs_skipped += 1
        self.on_skip(program, str(reason))

    def record_program(self, yielded: bool) -> bool:
        """
        Count a finished program during pagination.

        Returns:
            True when maxPrograms has been reached and the scan must stop
        """
        self.stats.programs_scanned += 1
        if yielded:
            self.stats.programs_yielded += 1
        return self._check_cap()

    def record_included_program(self, yielded: bool) -> bool:
        """Same as record_program, but honoring the include_cap policy."""
        self.stats.programs_scanned += 1
        if yielded:
            self.stats.programs_yielded += 1

        cap = self.config.include_cap
        if cap == IncludeCap.COUNT:
            return self._check_cap()
        if cap == IncludeCap.FIRST and self.config.max_programs != 0 and yielded:
            self.stats.stopped_at_cap = True
            logger.info(f'[{self.platform}] Stopping after first program with targets')
            return True
        return False

    def _check_cap(self) -> bool:
        if self.config.cap_reached(self.stats.programs_yielded):
            self.stats.stopped_at_cap = True
            logger.info(f'[{self.platform}] Reached maxPrograms={self.config.max_programs}')
            return True
        return False
