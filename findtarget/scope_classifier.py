#!/usr/bin/env python3
"""
Scope Classifier

Decides which scope entries are emitted for a given scope breadth and how
wildcard entries are rewritten into bare hostnames. Both platforms share the
same three modes but encode their assets differently:

    Bugcrowd   - no asset type, breadth is inferred from the string shape
                 (a leading "*." means wildcard)
    HackerOne  - explicit asset_type of "URL" or "WILDCARD"

Every function here is pure: it returns the list of strings to print and
never writes anything itself.

Author: findtarget Team
License: MIT
"""

from dataclasses import dataclass
from enum import Enum
from typing import List
from urllib.parse import urlparse


class ScopeMode(Enum):
    """Scope breadth selected in the template"""
    NARROW = "narrow"
    WIDE = "wide"
    ALL = "all"


def _text(value) -> str:
    """Scope fields are strings; anything else counts as missing."""
    return value if isinstance(value, str) else ''


@dataclass
class BugcrowdTarget:
    """A single target listed in a Bugcrowd brief document"""
    name: str = ""
    uri: str = ""
    category: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "BugcrowdTarget":
        return cls(
            name=_text(data.get('name')),
            uri=_text(data.get('uri')),
            category=_text(data.get('category')),
        )


@dataclass
class HackerOneScope:
    """A structured scope record returned by the HackerOne API"""
    asset_type: str = ""
    asset_identifier: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "HackerOneScope":
        attrs = data.get('attributes')
        if not isinstance(attrs, dict):
            attrs = {}
        return cls(
            asset_type=_text(attrs.get('asset_type')),
            asset_identifier=_text(attrs.get('asset_identifier')),
        )


def is_url(value: str) -> bool:
    """True when the value parses with both a scheme and a host."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def first_token(text: str) -> str:
    """Bugcrowd sometimes appends a description after the URL."""
    return text.split(' ')[0]


def strip_wildcard(name: str) -> str:
    """
    Turn "*.example.com" into "example.com".

    Returns an empty string when the name is not a single-level wildcard.
    """
    if not name.startswith('*.'):
        return ''
    host = name[2:]
    if '*' in host:
        return ''
    return host


# ============================================================================
# BUGCROWD
# ============================================================================

def _bugcrowd_narrow(name: str, uri: str) -> List[str]:
    if name.startswith('*'):
        return []
    if is_url(name):
        return [name]
    if is_url(uri):
        return [uri]
    return []


def _bugcrowd_wide(name: str) -> List[str]:
    host = strip_wildcard(name)
    return [host] if host else []


def classify_bugcrowd_target(mode: ScopeMode, target: BugcrowdTarget) -> List[str]:
    """
    Classify one Bugcrowd target.

    Args:
        mode: Scope breadth
        target: Target from the brief document

    Returns:
        Zero or one string to emit
    """
    name = first_token(target.name)
    uri = first_token(target.uri)

    if mode == ScopeMode.NARROW:
        return _bugcrowd_narrow(name, uri)
    if mode == ScopeMode.WIDE:
        return _bugcrowd_wide(name)
    if mode == ScopeMode.ALL:
        return _bugcrowd_narrow(name, uri) or _bugcrowd_wide(name)
    return []


# ============================================================================
# HACKERONE
# ============================================================================

def hackerone_wildcard_hosts(identifier: str) -> List[str]:
    """
    Rewrite a wildcard identifier into a bare host.

    Comma separated identifiers only keep their first element. A second "*"
    left after removing the prefix makes the identifier ambiguous, so it is
    dropped.
    """
    if ',' in identifier:
        host = identifier.split(',')[0].strip()
    elif '*' in identifier:
        host = identifier.strip()
    else:
        return []

    host = host.replace('*.', '', 1)
    if not host or '*' in host:
        return []
    return [host]


def hackerone_url_hosts(identifier: str) -> List[str]:
    """Every comma separated element of a URL identifier that has no "*"."""
    if ',' in identifier:
        hosts = [part.strip() for part in identifier.split(',')]
        return [host for host in hosts if host and '*' not in host]

    identifier = identifier.strip()
    if identifier and '*' not in identifier:
        return [identifier]
    return []


def classify_hackerone_scope(mode: ScopeMode, scope: HackerOneScope,
                             all_includes_urls: bool = False) -> List[str]:
    """
    Classify one HackerOne structured scope.

    In ALL mode HackerOne has historically applied wildcard rewriting to every
    asset whatever its type, which means URL assets without a "*" are never
    printed. all_includes_urls switches ALL to the narrow/wide union that
    Bugcrowd uses.
    """
    asset_type = scope.asset_type.lower()
    identifier = scope.asset_identifier

    if mode == ScopeMode.WIDE:
        if asset_type == 'wildcard':
            return hackerone_wildcard_hosts(identifier)
        return []

    if mode == ScopeMode.NARROW:
        if asset_type == 'url':
            return hackerone_url_hosts(identifier)
        return []

    if mode == ScopeMode.ALL:
        if not all_includes_urls:
            return hackerone_wildcard_hosts(identifier)
        if asset_type == 'url':
            return hackerone_url_hosts(identifier)
        if asset_type == 'wildcard':
            return hackerone_wildcard_hosts(identifier)
    return []
