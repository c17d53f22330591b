"""Shared HTTP session for the Open-Meteo lookups.

Every provider call goes through ``get_json`` so transport failures, non-OK
statuses, and unreadable bodies all surface as ``NetworkError``. No retry
adapter is mounted: a failed call is reported once and left to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import requests

from core.errors import NetworkError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "city-weather-widget/1.0"


def build_session(user_agent: Optional[str] = None) -> requests.Session:
    session = requests.Session()
    session.headers.update({
        "User-Agent": user_agent or DEFAULT_USER_AGENT,
        "Accept": "application/json",
    })
    return session


_session = build_session()


def get_json(
    url: str,
    params: Mapping[str, Any],
    *,
    timeout: float = DEFAULT_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> Dict[str, Any]:
    """GET ``url`` and return the decoded JSON object.

    ``requests`` URL-escapes every query parameter, so free-text values such as
    city names can be passed through unchanged.
    """

    client = session or _session
    try:
        response = client.get(url, params=dict(params), timeout=timeout)
    except requests.RequestException as exc:
        logger.warning("Request to %s failed: %s", url, exc)
        raise NetworkError() from exc

    if not response.ok:
        logger.warning("Request to %s returned HTTP %s", url, response.status_code)
        raise NetworkError(status_code=response.status_code)

    try:
        data = response.json()
    except ValueError as exc:
        logger.warning("Response from %s was not valid JSON", url)
        raise NetworkError() from exc
    if not isinstance(data, dict):
        raise NetworkError()
    return data


__all__ = ["DEFAULT_TIMEOUT", "DEFAULT_USER_AGENT", "build_session", "get_json"]
