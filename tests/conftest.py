"""
Shared fixtures: canned HTTP responses and a routing mock session.

Nothing here touches the network; every FetchClient in the suite gets a
MagicMock session whose get() looks the URL up in a routes table.
"""

import json
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

PROJECT_ROOT = str(Path(__file__).resolve().parent.parent)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


def _make_response(status=200, json_data=None, text=''):
    resp = MagicMock()
    resp.status_code = status
    resp.text = json.dumps(json_data) if json_data is not None else text
    return resp


def _make_session(routes):
    """
    routes maps URL -> response, exception instance, or list of either
    (consumed in order). Unknown URLs answer 404.
    """
    session = MagicMock()
    session.headers = {}
    session.proxies = {}
    session.auth = None

    def _get(url, **kwargs):
        result = routes.get(url)
        if isinstance(result, list):
            result = result.pop(0)
        if result is None:
            return _make_response(404, text='not found')
        if isinstance(result, Exception):
            raise result
        return result

    session.get = MagicMock(side_effect=_get)
    return session


@pytest.fixture
def make_response():
    return _make_response


@pytest.fixture
def make_session():
    return _make_session


@pytest.fixture
def emitted():
    """Collects emitted targets in order"""
    return []


@pytest.fixture
def skipped():
    """Collects (program, reason) pairs reported as skipped"""
    return []


@pytest.fixture
def sinks(emitted, skipped):
    return {
        'emit': emitted.append,
        'on_skip': lambda program, reason: skipped.append((program, reason)),
    }


@pytest.fixture
def connection_error():
    return requests.exceptions.ConnectionError('connection refused')


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No HackerOne credentials in the environment and no stray .env file."""
    for name in ('H1_USERNAME', 'H1_API_KEY'):
        monkeypatch.setenv(name, 'placeholder')
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path
