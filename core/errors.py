"""Typed failures raised by the weather lookup pipeline.

Every error carries a short ``message`` that the presentation layer can show
as-is, so entry points never need to inspect exception strings.
"""

from __future__ import annotations

from typing import Optional


class WeatherLookupError(Exception):
    """Base class for failures surfaced to the presentation layer."""

    default_message = "Could not fetch weather"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        return type(self).__name__


class NetworkError(WeatherLookupError):
    """HTTP call failed or returned a non-success status."""

    default_message = "Could not fetch weather"

    def __init__(self, message: Optional[str] = None, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(WeatherLookupError):
    """Geocoding returned no candidates for the query."""

    default_message = "City not found"

    def __init__(self, query: str, message: Optional[str] = None) -> None:
        super().__init__(message)
        self.query = query


class LocationUnavailableError(WeatherLookupError):
    """Device geolocation was denied, unsupported, or unusable."""

    default_message = "Permission denied or position unavailable."


class InvalidQueryError(WeatherLookupError, ValueError):
    """Raised before any HTTP call when the city name is blank."""

    default_message = "Please type a city name."


__all__ = [
    "WeatherLookupError",
    "NetworkError",
    "NotFoundError",
    "LocationUnavailableError",
    "InvalidQueryError",
]
