#!/usr/bin/env python3
"""
Template and environment loading.

A template is a YAML file shaped like:

    findtarget:
      bugcrowd:
        reward: points
        category: website
        scope: wide
        maxPrograms: 5
        include: []
      hackerone:
        scope: all
    proxy: socks5://127.0.0.1:9050

Each platform block is optional; a platform is scanned only when its block
is present.

Author: findtarget Team
License: MIT
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

import yaml
from dotenv import load_dotenv

from .errors import ConfigError
from .scope_classifier import ScopeMode

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
PROXY_SCHEMES = ('socks5', 'socks5h')


class IncludeCap(Enum):
    """How maxPrograms applies when an include list replaces pagination"""
    NONE = "none"
    COUNT = "count"
    FIRST = "first"


@dataclass
class PlatformConfig:
    """Settings shared by both platforms"""
    reward: str = ""
    category: str = ""
    scope: ScopeMode = ScopeMode.ALL
    max_programs: int = 0
    include: List[str] = field(default_factory=list)
    include_cap: IncludeCap = IncludeCap.NONE

    def cap_reached(self, yielded: int) -> bool:
        return self.max_programs != 0 and yielded >= self.max_programs


@dataclass
class BugcrowdConfig(PlatformConfig):
    require_container: bool = True
    container_class: str = "react-component"

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "BugcrowdConfig":
        data = _platform_dict(data)
        return cls(
            require_container=_parse_bool(data, 'requireContainer', True),
            container_class=str(data.get('containerClass') or 'react-component'),
            **_common_fields(data, IncludeCap.NONE),
        )


@dataclass
class HackerOneConfig(PlatformConfig):
    include_cap: IncludeCap = IncludeCap.FIRST
    all_includes_urls: bool = False
    h1_username: str = ""
    h1_token: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "HackerOneConfig":
        data = _platform_dict(data)
        return cls(
            all_includes_urls=_parse_bool(data, 'allIncludesUrls', False),
            h1_username=str(data.get('h1Username') or ''),
            h1_token=str(data.get('h1Token') or ''),
            **_common_fields(data, IncludeCap.FIRST),
        )


@dataclass
class RunConfig:
    """Everything a run needs, already validated and defaulted"""
    bugcrowd: Optional[BugcrowdConfig] = None
    hackerone: Optional[HackerOneConfig] = None
    proxy: str = ""
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RunConfig":
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError('Template root must be a mapping')

        platforms = data.get('findtarget') or {}
        if not isinstance(platforms, dict):
            raise ConfigError("'findtarget' must be a mapping")

        config = cls(
            proxy=str(data.get('proxy') or ''),
            timeout=_parse_timeout(data.get('timeout', DEFAULT_TIMEOUT)),
        )
        # An empty block ("bugcrowd:") still selects the platform
        if 'bugcrowd' in platforms:
            config.bugcrowd = BugcrowdConfig.from_dict(platforms['bugcrowd'])
        if 'hackerone' in platforms:
            config.hackerone = HackerOneConfig.from_dict(platforms['hackerone'])

        if config.proxy:
            validate_proxy(config.proxy)
        return config


@dataclass
class Credentials:
    """HackerOne API credentials"""
    h1_username: str = ""
    h1_api_key: str = ""

    def require(self):
        if not self.h1_api_key:
            raise ConfigError('H1_API_KEY not found in environment variables')
        if not self.h1_username:
            raise ConfigError('H1_USERNAME not found in environment variables')


def _platform_dict(data) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError('Platform settings must be a mapping')
    return data


def _common_fields(data: dict, default_cap: IncludeCap) -> dict:
    scope_value = data.get('scope') or ScopeMode.ALL.value
    try:
        scope = ScopeMode(str(scope_value).lower())
    except ValueError:
        raise ConfigError(f"Invalid scope '{scope_value}' (expected narrow, wide or all)")

    try:
        max_programs = int(data.get('maxPrograms') or 0)
    except (TypeError, ValueError):
        raise ConfigError(f"maxPrograms must be an integer, got {data.get('maxPrograms')!r}")
    if max_programs < 0:
        raise ConfigError('maxPrograms must be 0 (unlimited) or a positive integer')

    include = data.get('include') or []
    if isinstance(include, str):
        include = [include]
    if not isinstance(include, list):
        raise ConfigError('include must be a list of program URLs')

    cap_value = data.get('includeCap') or default_cap.value
    try:
        include_cap = IncludeCap(str(cap_value).lower())
    except ValueError:
        raise ConfigError(f"Invalid includeCap '{cap_value}' (expected none, count or first)")

    return {
        'reward': str(data.get('reward') or ''),
        'category': str(data.get('category') or ''),
        'scope': scope,
        'max_programs': max_programs,
        'include': [str(url).strip() for url in include if str(url).strip()],
        'include_cap': include_cap,
    }


def _parse_bool(data: dict, key: str, default: bool) -> bool:
    value = data.get(key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ('true', 'yes', '1'):
        return True
    if isinstance(value, str) and value.lower() in ('false', 'no', '0'):
        return False
    raise ConfigError(f'{key} must be true or false, got {value!r}')


def _parse_timeout(value) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f'timeout must be a number of seconds, got {value!r}')
    if timeout <= 0:
        raise ConfigError('timeout must be greater than zero')
    return timeout


def validate_proxy(proxy_url: str) -> str:
    """
    Check that proxy_url is a usable SOCKS5 endpoint.

    Returns:
        The proxy URL unchanged

    Raises:
        ConfigError: when the scheme is not SOCKS5 or the host is missing
    """
    try:
        parsed = urlparse(proxy_url)
        port = parsed.port
    except ValueError as e:
        raise ConfigError(f'invalid proxy URL: {e}')

    if parsed.scheme.lower() not in PROXY_SCHEMES:
        raise ConfigError(f"invalid proxy URL '{proxy_url}': only socks5:// is supported")
    if not parsed.hostname:
        raise ConfigError(f"invalid proxy URL '{proxy_url}': missing host")
    if port is None:
        logger.debug(f'No port in proxy URL {proxy_url}, using the SOCKS default')
    return proxy_url


def load_template(template_path: str) -> RunConfig:
    """
    Load the YAML template from the user-specified path.

    Raises:
        ConfigError: when the file is missing, unreadable or invalid
    """
    if not template_path:
        raise ConfigError('no template path provided')

    path = Path(template_path)
    if not path.is_file():
        raise ConfigError(f'config file not found: {template_path}')

    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f'failed to read config file: {e}')
    except yaml.YAMLError as e:
        raise ConfigError(f'failed to parse YAML: {e}')

    return RunConfig.from_dict(data)


def load_credentials(env_flag: bool = False, env_file: str = '.env',
                     config: Optional[RunConfig] = None) -> Credentials:
    """
    Read HackerOne credentials from the environment.

    The .env file is loaded when env_flag is set or the file exists. Template
    values (h1Username / h1Token) are only used when the environment has
    none.
    """
    env_exists = os.path.isfile(env_file)
    if env_flag and not env_exists:
        raise ConfigError(f'.env file not found or could not be loaded: {env_file}')
    if env_exists:
        load_dotenv(env_file)
        logger.debug(f'Loaded environment from {env_file}')

    credentials = Credentials(
        h1_username=os.getenv('H1_USERNAME', ''),
        h1_api_key=os.getenv('H1_API_KEY', ''),
    )

    if config is not None and config.hackerone is not None:
        credentials.h1_username = credentials.h1_username or config.hackerone.h1_username
        credentials.h1_api_key = credentials.h1_api_key or config.hackerone.h1_token

    return credentials
