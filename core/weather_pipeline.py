"""Compose the resolver and fetcher into the lookups the widget exposes.

Three callers share the same two steps:

* a city search resolves the name and then fetches current weather,
* a device-location lookup already has coordinates and only fetches,
* the preset table runs the city search once per configured city and keeps
  going when one of them fails.

Errors from either step propagate unchanged; there is no retry and no
fallback provider. Only the preset table catches failures, turning each one
into a degraded row.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from time import perf_counter
from typing import Callable, Iterable, List, Optional

from core import forecast, geocoding
from core.errors import LocationUnavailableError, NetworkError, WeatherLookupError
from core.lookup_logger import LookupLogger, LookupRecord
from core.weather_records import CityRow, CityWeather, LocationRecord, WeatherRecord

logger = logging.getLogger(__name__)

ResolverFn = Callable[[str], LocationRecord]
FetcherFn = Callable[[float, float], WeatherRecord]


def validate_coordinates(lat: object, lon: object) -> tuple[float, float]:
    """Return ``(lat, lon)`` as floats or raise ``LocationUnavailableError``."""

    try:
        lat_value = float(lat)  # type: ignore[arg-type]
        lon_value = float(lon)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise LocationUnavailableError() from exc
    if isinstance(lat, bool) or isinstance(lon, bool):
        raise LocationUnavailableError()
    if not (math.isfinite(lat_value) and math.isfinite(lon_value)):
        raise LocationUnavailableError()
    if not (-90.0 <= lat_value <= 90.0 and -180.0 <= lon_value <= 180.0):
        raise LocationUnavailableError()
    return lat_value, lon_value


class WeatherPipeline:
    """Run city, coordinate, and preset-table lookups.

    ``resolver`` and ``fetcher`` default to the Open-Meteo implementations;
    entry points pass configured partials and tests pass fakes.
    """

    def __init__(
        self,
        *,
        resolver: Optional[ResolverFn] = None,
        fetcher: Optional[FetcherFn] = None,
        lookup_logger: Optional[LookupLogger] = None,
        max_workers: int = 1,
    ) -> None:
        self._resolve = resolver or (lambda name: geocoding.resolve(name))
        self._fetch = fetcher or (lambda lat, lon: forecast.fetch_current(lat, lon))
        self._lookup_logger = lookup_logger
        self._max_workers = max(int(max_workers), 1)

    def lookup_city_weather(self, city_name: str) -> CityWeather:
        """Resolve ``city_name`` and fetch its current weather."""

        started = perf_counter()
        location: Optional[LocationRecord] = None
        try:
            location = self._resolve(city_name)
            weather = self._fetch(location.latitude, location.longitude)
        except WeatherLookupError as exc:
            self._log("city", started, query=city_name, location=location, error=exc)
            raise
        self._log("city", started, query=city_name, location=location, weather=weather)
        return CityWeather(location=location, weather=weather)

    def lookup_by_coordinates(self, lat: float, lon: float) -> WeatherRecord:
        """Fetch current weather for a device position; no place name is resolved."""

        started = perf_counter()
        try:
            lat_value, lon_value = validate_coordinates(lat, lon)
            weather = self._fetch(lat_value, lon_value)
        except WeatherLookupError as exc:
            self._log("coordinates", started, error=exc)
            raise
        self._log("coordinates", started, lat=lat_value, lon=lon_value, weather=weather)
        return weather

    def lookup_preset_cities(self, cities: Iterable[str]) -> List[CityRow]:
        """Return one row per city, in input order.

        A failed lookup only degrades its own row. With ``max_workers`` above
        one the lookups run on a thread pool; the rows are the same either way.
        """

        names = list(cities)
        if self._max_workers <= 1 or len(names) <= 1:
            return [self._preset_row(name) for name in names]
        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(names))) as pool:
            return list(pool.map(self._preset_row, names))

    def _preset_row(self, city_name: str) -> CityRow:
        """WHAT: look up one preset city and always return a row.

        WHY: one bad city must not blank the whole table.
        HOW: run the same resolve-then-fetch steps as a city search; a typed
        lookup error becomes a degraded row, and anything unexpected is logged
        with its traceback and recorded as a ``NetworkError`` row.
        """

        started = perf_counter()
        location: Optional[LocationRecord] = None
        try:
            location = self._resolve(city_name)
            weather = self._fetch(location.latitude, location.longitude)
        except WeatherLookupError as exc:
            logger.info("Preset city %r could not be loaded: %s", city_name, exc.message)
            self._log("preset", started, query=city_name, location=location, error=exc)
            return CityRow(query=city_name, location=location, error=exc)
        except Exception:
            logger.exception("Unexpected failure while loading preset city %r", city_name)
            error = NetworkError()
            self._log("preset", started, query=city_name, location=location, error=error)
            return CityRow(query=city_name, location=location, error=error)
        self._log("preset", started, query=city_name, location=location, weather=weather)
        return CityRow(query=city_name, location=location, weather=weather)

    def _log(
        self,
        kind: str,
        started: float,
        *,
        query: Optional[str] = None,
        location: Optional[LocationRecord] = None,
        lat: Optional[float] = None,
        lon: Optional[float] = None,
        weather: Optional[WeatherRecord] = None,
        error: Optional[WeatherLookupError] = None,
    ) -> None:
        """WHAT: emit a ``LookupRecord`` when a lookup logger is attached.

        WHY: success and failure paths share one record shape, so the JSONL
        file can be filtered by ``kind`` and ``error_kind`` alone.
        HOW: prefer the resolved location's coordinates over the raw ones and
        measure latency from ``started``.
        """

        if not self._lookup_logger or not self._lookup_logger.enabled:
            return
        if location is not None:
            lat, lon = location.latitude, location.longitude
        record = LookupRecord.new(
            kind=kind,
            success=error is None,
            query=query,
            error_kind=error.kind if error else None,
            resolved_name=location.display_name if location else None,
            country=location.country if location else None,
            latitude=lat,
            longitude=lon,
            weather_code=weather.weather_code if weather else None,
            latency_ms=int((perf_counter() - started) * 1000),
        )
        self._lookup_logger.log_lookup(record)


_default_pipeline = WeatherPipeline()


def lookup_city_weather(city_name: str) -> CityWeather:
    return _default_pipeline.lookup_city_weather(city_name)


def lookup_by_coordinates(lat: float, lon: float) -> WeatherRecord:
    return _default_pipeline.lookup_by_coordinates(lat, lon)


def lookup_preset_cities(cities: Iterable[str]) -> List[CityRow]:
    return _default_pipeline.lookup_preset_cities(cities)


__all__ = [
    "WeatherPipeline",
    "validate_coordinates",
    "lookup_city_weather",
    "lookup_by_coordinates",
    "lookup_preset_cities",
]
