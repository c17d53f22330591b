"""Immutable records passed between the resolver, fetcher, and renderers."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from core.errors import NetworkError, WeatherLookupError


@dataclass(frozen=True)
class LocationRecord:
    """Canonical place returned by the geocoder."""

    display_name: str
    country: Optional[str]
    latitude: float
    longitude: float

    @classmethod
    def from_geocoding_result(cls, result: Mapping[str, Any]) -> "LocationRecord":
        """Build a record from one entry of the geocoder's ``results`` list.

        A result without a name or usable coordinates is a provider failure,
        never a partially-filled location.
        """

        name = result.get("name")
        if not isinstance(name, str) or not name.strip():
            raise NetworkError("Geocoding result is missing a place name")
        country = result.get("country")
        return cls(
            display_name=name,
            country=country if isinstance(country, str) and country else None,
            latitude=_require_float(result, "latitude"),
            longitude=_require_float(result, "longitude"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class WeatherRecord:
    """Current-conditions snapshot; units are whatever the provider returns."""

    temperature_c: float
    wind_speed_kmh: float
    weather_code: int
    observed_at: str

    @classmethod
    def from_current_weather(cls, payload: Mapping[str, Any]) -> "WeatherRecord":
        """Build a record from the forecast response's ``current_weather`` block."""

        code = payload.get("weathercode")
        if isinstance(code, bool) or not isinstance(code, (int, float)) or int(code) != code:
            raise NetworkError("Weather response is missing a weather code")
        observed_at = payload.get("time")
        if not isinstance(observed_at, str) or not observed_at.strip():
            observed_at = _utc_now()
        return cls(
            temperature_c=_require_float(payload, "temperature"),
            wind_speed_kmh=_require_float(payload, "windspeed"),
            weather_code=int(code),
            observed_at=observed_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CityWeather:
    location: LocationRecord
    weather: WeatherRecord

    def to_dict(self) -> Dict[str, Any]:
        return {"location": self.location.to_dict(), "weather": self.weather.to_dict()}


@dataclass(frozen=True)
class CityRow:
    """One row of the preset-cities table; degraded when the lookup failed."""

    query: str
    location: Optional[LocationRecord] = None
    weather: Optional[WeatherRecord] = None
    error: Optional[WeatherLookupError] = None

    @property
    def degraded(self) -> bool:
        return self.weather is None


def _require_float(payload: Mapping[str, Any], key: str) -> float:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise NetworkError(f"Provider response is missing '{key}'")
    return float(value)


def _utc_now() -> str:
    return datetime.now(tz=timezone.utc).strftime("%Y-%m-%dT%H:%M")


__all__ = ["LocationRecord", "WeatherRecord", "CityWeather", "CityRow"]
