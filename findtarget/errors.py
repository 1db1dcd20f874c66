"""
Exceptions raised while configuring or running a scope scan.

Author: findtarget Team
License: MIT
"""


class FindTargetError(Exception):
    """Base class for every error raised by findtarget."""


class ConfigError(FindTargetError):
    """Invalid template, proxy or credentials. Raised before any request."""


class FetchError(FindTargetError):
    """A request failed, returned a non-200 status or an undecodable body."""

    def __init__(self, message: str, url: str = "", status_code: int = 0):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ScopeResolutionError(FindTargetError):
    """A program page did not expose the document listing its scope."""
