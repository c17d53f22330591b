"""Assemble the weather pipeline and run the interactive CLI loop."""

from __future__ import annotations

import argparse
import logging
from functools import partial
from typing import List, Optional, Sequence

from app.config import (
    get_default_city,
    get_forecast_url,
    get_geocoding_url,
    get_http_timeout,
    get_http_user_agent,
    get_log_backup_count,
    get_log_coordinate_precision,
    get_log_level,
    get_log_max_bytes,
    get_lookup_log_path,
    get_preset_cities,
    get_preset_max_workers,
    is_lookup_logging_enabled,
)
from core import forecast, geocoding
from core.errors import WeatherLookupError
from core.http import build_session
from core.lookup_logger import LookupLogger
from core.render import WeatherCard, render_city, render_city_rows, render_coordinates, render_error
from core.weather_pipeline import WeatherPipeline

logger = logging.getLogger(__name__)


# -- Pipeline construction -----------------------------------------------------
def build_pipeline() -> WeatherPipeline:
    """Wire the resolver, fetcher, and lookup log from ``app.config``.

    The CLI and the web API share this so both hit the same endpoints with the
    same timeout and audit settings.
    """
    session = build_session(get_http_user_agent())
    timeout = get_http_timeout()
    resolver = partial(geocoding.resolve, url=get_geocoding_url(), timeout=timeout, session=session)
    fetcher = partial(forecast.fetch_current, url=get_forecast_url(), timeout=timeout, session=session)

    lookup_logger = LookupLogger(
        log_path=get_lookup_log_path(),
        enabled=is_lookup_logging_enabled(),
        max_bytes=get_log_max_bytes(),
        backup_count=get_log_backup_count(),
        coordinate_precision=get_log_coordinate_precision(),
    )
    return WeatherPipeline(
        resolver=resolver,
        fetcher=fetcher,
        lookup_logger=lookup_logger,
        max_workers=get_preset_max_workers(),
    )


# -- Card lookups shared by the CLI and web API ----------------------------------
def city_card(pipeline: WeatherPipeline, city: str) -> WeatherCard:
    """Run a city search and always return a card; failures become degraded cards."""

    try:
        result = pipeline.lookup_city_weather(city)
    except WeatherLookupError as exc:
        logger.info("City lookup for %r failed: %s", city, exc.message)
        return render_error(exc)
    return render_city(result.location, result.weather)


def coordinates_card(pipeline: WeatherPipeline, lat: float, lon: float) -> WeatherCard:
    try:
        weather = pipeline.lookup_by_coordinates(lat, lon)
    except WeatherLookupError as exc:
        logger.info("Coordinate lookup failed: %s", exc.message)
        return render_error(exc, lookup="coordinates")
    return render_coordinates(float(lat), float(lon), weather)


# -- Text output -----------------------------------------------------------------
def format_card(card: WeatherCard) -> str:
    lines = [card.title, card.meta]
    if card.is_error:
        return "\n".join(lines)
    lines.extend([f"{card.temperature}  {card.description}", card.wind_box, card.time_box])
    return "\n".join(lines)


def format_preset_table(pipeline: WeatherPipeline, cities: Sequence[str]) -> str:
    rows = render_city_rows(pipeline.lookup_preset_cities(cities))
    lines: List[str] = []
    for row in rows:
        if row["degraded"]:
            lines.append(f"{row['city']:<28} {row['notice']}")
        else:
            lines.append(f"{row['city']:<28} {row['temperature']:>6} °C {row['wind']:>6} km/h")
    return "\n".join(lines)


def _handle_command(pipeline: WeatherPipeline, message: str) -> str:
    parts = message.split()
    if parts and parts[0].lower() == "here":
        if len(parts) != 3:
            return "Usage: here LAT LON"
        return format_card(coordinates_card(pipeline, parts[1], parts[2]))  # type: ignore[arg-type]
    if message.lower() == "presets":
        return format_preset_table(pipeline, get_preset_cities())
    return format_card(city_card(pipeline, message))


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Current weather for a city or coordinates")
    parser.add_argument("--city", type=str, default=None, help="Look up one city and exit.")
    parser.add_argument("--lat", type=float, default=None)
    parser.add_argument("--lon", type=float, default=None)
    parser.add_argument("--presets", action="store_true", help="Print the preset-cities table and exit.")
    args = parser.parse_args(argv)
    if (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be given together")
    return args


# -- Interactive CLI loop ------------------------------------------------------
def main(argv: Optional[Sequence[str]] = None) -> None:
    """Print one lookup when flags are given, otherwise read queries from stdin."""

    args = _parse_args(argv)
    logging.basicConfig(
        format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
        level=getattr(logging, get_log_level(), logging.INFO),
    )
    pipeline = build_pipeline()

    if args.city is not None:
        print(format_card(city_card(pipeline, args.city)))
        return
    if args.lat is not None:
        print(format_card(coordinates_card(pipeline, args.lat, args.lon)))
        return
    if args.presets:
        print(format_preset_table(pipeline, get_preset_cities()))
        return

    print(format_card(city_card(pipeline, get_default_city())))
    print()
    print("Type a city name, 'here LAT LON', 'presets', or 'quit'.")

    while True:
        try:
            message = input("City: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nExiting.")
            break

        if message.lower() in {"quit", "exit"}:
            print("Goodbye!")
            break
        if not message:
            print("Please type a city name.")
            continue

        print()
        print(_handle_command(pipeline, message))
        print()


if __name__ == "__main__":
    main()
