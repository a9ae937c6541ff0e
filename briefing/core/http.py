"""Thin HTTP helpers shared by the provider clients.

Both helpers return ``None`` instead of raising: a timeout, a connection error,
a non-2xx status or an unparseable body all mean "this source is unavailable".
"""

from typing import Any, Dict, Optional

import requests

from briefing.core.logger import logger

DEFAULT_TIMEOUT = 10
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def _get(
    url: str,
    params: Optional[Dict[str, Any]],
    timeout: float,
    headers: Optional[Dict[str, str]],
) -> Optional[requests.Response]:
    try:
        resp = requests.get(url, params=params, headers=headers, timeout=timeout)
    except requests.RequestException as exc:
        logger.warning(f"INFRA_FAILURE GET {url}: {exc}")
        return None

    if not 200 <= resp.status_code < 300:
        logger.warning(f"INFRA_FAILURE GET {url} HTTP {resp.status_code}: {resp.text[:200]}")
        return None
    return resp


def fetch_json(
    url: str,
    params: Optional[Dict[str, Any]] = None,
    timeout: float = DEFAULT_TIMEOUT,
    headers: Optional[Dict[str, str]] = None,
) -> Optional[Any]:
    """GET ``url`` and return the decoded JSON body, or None on any failure."""
    resp = _get(url, params, timeout, headers)
    if resp is None:
        return None
    try:
        return resp.json()
    except ValueError as exc:
        logger.warning(f"MALFORMED_BODY GET {url}: {exc}")
        return None


def fetch_text(
    url: str,
    params: Optional[Dict[str, Any]] = None,
    timeout: float = DEFAULT_TIMEOUT,
    headers: Optional[Dict[str, str]] = None,
) -> Optional[str]:
    """GET ``url`` and return the body as text, or None on any failure."""
    resp = _get(url, params, timeout, headers)
    if resp is None:
        return None
    return resp.text
