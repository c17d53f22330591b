"""Resolve free-text city names into coordinates via Open-Meteo geocoding."""

from __future__ import annotations

import logging
from typing import Optional

import requests

from core.errors import InvalidQueryError, NetworkError, NotFoundError
from core.http import DEFAULT_TIMEOUT, get_json
from core.weather_records import LocationRecord

logger = logging.getLogger(__name__)

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"


def normalize_city(name: Optional[str]) -> str:
    """Trim ``name``; a blank query is rejected before any request is sent."""

    clean = (name or "").strip()
    if not clean:
        raise InvalidQueryError()
    return clean


def resolve(
    city_name: str,
    *,
    url: str = GEOCODING_URL,
    timeout: float = DEFAULT_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> LocationRecord:
    """Return the provider's top match for ``city_name``.

    Raises:
        InvalidQueryError: ``city_name`` is blank.
        NotFoundError: the provider returned no candidates.
        NetworkError: the request failed or the response was unusable.
    """

    city = normalize_city(city_name)
    data = get_json(
        url,
        {"name": city, "count": 1, "language": "en", "format": "json"},
        timeout=timeout,
        session=session,
    )
    results = data.get("results")
    if not isinstance(results, list) or not results:
        logger.info("No geocoding match for %r", city)
        raise NotFoundError(city)
    first = results[0]
    if not isinstance(first, dict):
        raise NetworkError("Geocoding result is malformed")
    return LocationRecord.from_geocoding_result(first)


__all__ = ["GEOCODING_URL", "normalize_city", "resolve"]
