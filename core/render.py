"""Pure view models for the weather card and the preset-cities table.

Nothing here touches the page: these helpers map lookup results (or errors)
to the strings each display slot should show, and the web and CLI adapters
write them out.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional

from core.errors import LocationUnavailableError, WeatherLookupError
from core.weather_codes import describe
from core.weather_records import CityRow, LocationRecord, WeatherRecord

PLACEHOLDER_TEMPERATURE = "— °C"
PLACEHOLDER_DESCRIPTION = "—"
PLACEHOLDER_TEMP_BOX = "Temp —"
PLACEHOLDER_WIND_BOX = "Wind —"
PLACEHOLDER_TIME_BOX = "Time —"
DEGRADED_ROW_TEXT = "Could not load"
LOCATION_FETCH_FAILED_TEXT = "Unable to fetch weather for your location."


@dataclass(frozen=True)
class WeatherCard:
    """Every text slot of the main weather card."""

    title: str
    meta: str
    temperature: str
    description: str
    temp_box: str
    wind_box: str
    time_box: str
    is_error: bool = False
    error_kind: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def format_coordinates(lat: float, lon: float) -> str:
    return f"Coordinates: {lat:.3f}, {lon:.3f}"


def format_observed_at(observed_at: str) -> str:
    """Render the provider timestamp the way the card shows it (``T`` -> space, no ``Z``)."""

    return observed_at.replace("T", " ").replace("Z", "")


def _weather_card(title: str, meta: str, weather: WeatherRecord) -> WeatherCard:
    temperature = f"{weather.temperature_c:.1f} °C"
    return WeatherCard(
        title=title,
        meta=meta,
        temperature=temperature,
        description=describe(weather.weather_code),
        temp_box=f"Temp: {temperature}",
        wind_box=f"{weather.wind_speed_kmh:.1f} km/h",
        time_box=format_observed_at(weather.observed_at),
    )


def render_city(location: LocationRecord, weather: WeatherRecord) -> WeatherCard:
    title = f"{location.display_name}, {location.country or ''}"
    return _weather_card(title, format_coordinates(location.latitude, location.longitude), weather)


def render_coordinates(lat: float, lon: float, weather: WeatherRecord) -> WeatherCard:
    return _weather_card("Your location", format_coordinates(lat, lon), weather)


def _placeholder_card(title: str, meta: str, *, is_error: bool, error_kind: Optional[str] = None) -> WeatherCard:
    return WeatherCard(
        title=title,
        meta=meta,
        temperature=PLACEHOLDER_TEMPERATURE,
        description=PLACEHOLDER_DESCRIPTION,
        temp_box=PLACEHOLDER_TEMP_BOX,
        wind_box=PLACEHOLDER_WIND_BOX,
        time_box=PLACEHOLDER_TIME_BOX,
        is_error=is_error,
        error_kind=error_kind,
    )


def render_loading(query: str) -> WeatherCard:
    return _placeholder_card("Loading...", f'Searching for "{query}"...', is_error=False)


def render_error(error: WeatherLookupError, *, lookup: str = "city") -> WeatherCard:
    """Degraded card: dashes in every value slot and the error's message as meta.

    ``lookup`` names the search that failed. A device-location lookup that
    fails after the position was obtained keeps the "Your location" title and
    shows the location notice instead of a city-search one.
    """

    if isinstance(error, LocationUnavailableError):
        return _placeholder_card("Location unavailable", error.message, is_error=True, error_kind=error.kind)
    if lookup == "coordinates":
        return _placeholder_card("Your location", LOCATION_FETCH_FAILED_TEXT, is_error=True, error_kind=error.kind)
    return _placeholder_card("City not found", error.message, is_error=True, error_kind=error.kind)


def render_city_rows(rows: Iterable[CityRow]) -> List[Dict[str, Any]]:
    """Rows for the preset table; a failed city keeps its query and shows a notice."""

    rendered: List[Dict[str, Any]] = []
    for row in rows:
        if row.degraded or row.location is None or row.weather is None:
            rendered.append(
                {
                    "city": row.query,
                    "temperature": None,
                    "wind": None,
                    "degraded": True,
                    "notice": DEGRADED_ROW_TEXT,
                }
            )
            continue
        rendered.append(
            {
                "city": f"{row.location.display_name}, {row.location.country or ''}",
                "temperature": f"{row.weather.temperature_c:.1f}",
                "wind": f"{row.weather.wind_speed_kmh:.1f}",
                "degraded": False,
                "notice": None,
            }
        )
    return rendered


__all__ = [
    "WeatherCard",
    "format_coordinates",
    "format_observed_at",
    "render_city",
    "render_coordinates",
    "render_loading",
    "render_error",
    "render_city_rows",
]
