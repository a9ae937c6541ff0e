"""Shared fixtures: fake HTTP responses routed by URL, and a clean credential env."""

import inspect
from typing import Any, Callable, Dict, Optional
from unittest.mock import MagicMock, patch

import pytest
import requests

from briefing.core.config import _KEY_ENV_VARS


def make_response(json_body: Any = None, text: str = "", status_code: int = 200) -> MagicMock:
    """Build a MagicMock shaped like a ``requests.Response``."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    if json_body is None:
        resp.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        resp.json.return_value = json_body
    return resp


@pytest.fixture
def fake_response() -> Callable[..., MagicMock]:
    return make_response


@pytest.fixture
def http_routes():
    """Patch ``requests.get``; route by URL prefix to a callable or a response.

    A route function receives ``params`` and returns a response or None. Any
    unmatched request (or a None from a route) raises ConnectionError, so
    tests never touch the network.
    """
    routes: Dict[str, Any] = {}
    calls = []

    def fake_get(url, params=None, headers=None, timeout=None):
        calls.append((url, dict(params or {})))
        for prefix, handler in routes.items():
            if url.startswith(prefix):
                resp: Optional[MagicMock] = handler(params or {}) if inspect.isfunction(handler) else handler
                if resp is not None:
                    return resp
        raise requests.ConnectionError(f"no route for {url}")

    with patch("briefing.core.http.requests.get", side_effect=fake_get):
        yield _Routes(routes, calls)


class _Routes:
    """Route table handed to tests by the ``http_routes`` fixture."""

    def __init__(self, routes: Dict[str, Any], calls: list) -> None:
        self._routes = routes
        self.calls = calls

    def add(self, prefix: str, handler: Any) -> None:
        self._routes[prefix] = handler

    def urls(self) -> list:
        return [url for url, _ in self.calls]


@pytest.fixture
def no_api_keys(monkeypatch):
    """Unset every provider credential variable."""
    for names in _KEY_ENV_VARS.values():
        for name in names:
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def offline_yahoo():
    """Make every yfinance call fail."""
    with patch("briefing.providers.quotes.yf.download", side_effect=Exception("offline")), \
            patch("briefing.providers.quotes.yf.Ticker", side_effect=Exception("offline")):
        yield
