"""Translate Open-Meteo weather codes into short phrases."""

from __future__ import annotations

from typing import Dict

WEATHER_CODE_PHRASES: Dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    71: "Light snow",
    73: "Moderate snow",
    75: "Heavy snow",
    80: "Rain showers",
    81: "Moderate showers",
    95: "Thunderstorm",
}


def describe(code: int) -> str:
    """Return the phrase for ``code``; unknown codes keep the number visible."""

    phrase = WEATHER_CODE_PHRASES.get(code)
    if phrase is None:
        return f"Weather code: {code}"
    return phrase


__all__ = ["WEATHER_CODE_PHRASES", "describe"]
