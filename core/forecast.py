"""Fetch current conditions for a coordinate pair from Open-Meteo."""

from __future__ import annotations

from typing import Optional

import requests

from core.errors import NetworkError
from core.http import DEFAULT_TIMEOUT, get_json
from core.weather_records import WeatherRecord

FORECAST_URL = "https://api.open-meteo.com/v1/forecast"


def fetch_current(
    lat: float,
    lon: float,
    *,
    url: str = FORECAST_URL,
    timeout: float = DEFAULT_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> WeatherRecord:
    """Return the current-weather snapshot; timestamps are local to the coordinates."""

    data = get_json(
        url,
        {
            "latitude": lat,
            "longitude": lon,
            "current_weather": "true",
            "timezone": "auto",
        },
        timeout=timeout,
        session=session,
    )
    current = data.get("current_weather")
    if not isinstance(current, dict):
        raise NetworkError("Weather response is missing current conditions")
    return WeatherRecord.from_current_weather(current)


__all__ = ["FORECAST_URL", "fetch_current"]
