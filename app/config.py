"""Centralize defaults and environment lookups for the weather widget."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Mapping, Tuple

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# Default configuration values
# ---------------------------------------------------------------------------
_DEFAULT_GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
_DEFAULT_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
_DEFAULT_HTTP_TIMEOUT_SECONDS: float = 10.0
_DEFAULT_HTTP_USER_AGENT = "city-weather-widget/1.0"
_DEFAULT_PRESET_CITIES: Tuple[str, ...] = ("Bengaluru", "Kolkata", "Hyderabad", "Pune", "Ahmedabad")
_DEFAULT_CITY = "Bengaluru"
_DEFAULT_PRESET_MAX_WORKERS = 1
_DEFAULT_LOOKUP_LOGGING_ENABLED: bool = True
_DEFAULT_LOG_DIR = "logs"
_LOOKUP_LOG_FILENAME = "lookups.jsonl"
_DEFAULT_LOG_MAX_BYTES = 1_000_000
_DEFAULT_LOG_BACKUP_COUNT = 5
_DEFAULT_LOG_COORDINATE_PRECISION = 2
_DEFAULT_LOG_LEVEL = "INFO"
_DEFAULT_WEB_UI_HOST = "127.0.0.1"
_DEFAULT_WEB_UI_PORT = 9000

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _source(env: Dict[str, str] | None) -> Mapping[str, str]:
    return env if env is not None else os.environ


def _read_bool(env: Dict[str, str] | None, key: str, default: bool) -> bool:
    raw = _source(env).get(key)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in _FALSY:
        return False
    if normalized in _TRUTHY:
        return True
    return default


def _read_int(env: Dict[str, str] | None, key: str, default: int) -> int:
    raw = _source(env).get(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Provider endpoints and HTTP behaviour
# ---------------------------------------------------------------------------
def get_geocoding_url(env: Dict[str, str] | None = None) -> str:
    """Return the Open-Meteo geocoding search endpoint."""

    return _source(env).get("GEOCODING_URL") or _DEFAULT_GEOCODING_URL


def get_forecast_url(env: Dict[str, str] | None = None) -> str:
    """Return the Open-Meteo forecast endpoint."""

    return _source(env).get("FORECAST_URL") or _DEFAULT_FORECAST_URL


def get_http_timeout(env: Dict[str, str] | None = None) -> float:
    """Return the per-request timeout in seconds.

    Args:
        env: Optional mapping used instead of ``os.environ`` to simplify testing.

    Returns:
        A positive float; unparsable or non-positive values fall back to 10s.
    """

    raw = _source(env).get("HTTP_TIMEOUT_SECONDS")
    if raw is None:
        return _DEFAULT_HTTP_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError:
        return _DEFAULT_HTTP_TIMEOUT_SECONDS
    return value if value > 0 else _DEFAULT_HTTP_TIMEOUT_SECONDS


def get_http_user_agent(env: Dict[str, str] | None = None) -> str:
    return _source(env).get("HTTP_USER_AGENT") or _DEFAULT_HTTP_USER_AGENT


# ---------------------------------------------------------------------------
# Widget behaviour
# ---------------------------------------------------------------------------
def get_preset_cities(env: Dict[str, str] | None = None) -> List[str]:
    """Return the cities shown in the summary table, in display order."""

    raw = _source(env).get("PRESET_CITIES")
    if raw is None:
        return list(_DEFAULT_PRESET_CITIES)
    cities = [segment.strip() for segment in raw.split(",") if segment.strip()]
    return cities or list(_DEFAULT_PRESET_CITIES)


def get_default_city(env: Dict[str, str] | None = None) -> str:
    """Return the city loaded when the widget first opens."""

    value = (_source(env).get("DEFAULT_CITY") or "").strip()
    return value or _DEFAULT_CITY


def get_preset_max_workers(env: Dict[str, str] | None = None) -> int:
    """Return how many preset lookups may run at once (1 keeps them sequential)."""

    return max(_read_int(env, "PRESET_MAX_WORKERS", _DEFAULT_PRESET_MAX_WORKERS), 1)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
def is_lookup_logging_enabled(env: Dict[str, str] | None = None) -> bool:
    """Determine whether lookups are appended to the JSONL audit log."""

    return _read_bool(env, "LOOKUP_LOGGING_ENABLED", _DEFAULT_LOOKUP_LOGGING_ENABLED)


def get_log_dir(env: Dict[str, str] | None = None) -> Path:
    """Return the base directory for lookup logs."""

    override = _source(env).get("LOG_DIR")
    return Path(override) if override else Path(_DEFAULT_LOG_DIR)


def get_lookup_log_path(env: Dict[str, str] | None = None) -> Path:
    """Return the full path for the lookup log JSONL file."""

    return get_log_dir(env) / _LOOKUP_LOG_FILENAME


def get_log_max_bytes(env: Dict[str, str] | None = None) -> int:
    """Return the maximum size in bytes before rotating log files."""

    return max(_read_int(env, "LOG_MAX_BYTES", _DEFAULT_LOG_MAX_BYTES), 0)


def get_log_backup_count(env: Dict[str, str] | None = None) -> int:
    """Return the number of rotated log files to retain."""

    return max(_read_int(env, "LOG_BACKUP_COUNT", _DEFAULT_LOG_BACKUP_COUNT), 0)


def get_log_coordinate_precision(env: Dict[str, str] | None = None) -> int:
    """Return how many decimals of a coordinate may be written to the log."""

    value = _read_int(env, "LOG_COORDINATE_PRECISION", _DEFAULT_LOG_COORDINATE_PRECISION)
    return min(max(value, 0), 6)


def get_log_level(env: Dict[str, str] | None = None) -> str:
    value = (_source(env).get("LOG_LEVEL") or "").strip().upper()
    return value or _DEFAULT_LOG_LEVEL


# ---------------------------------------------------------------------------
# Web UI
# ---------------------------------------------------------------------------
def get_web_ui_host(env: Dict[str, str] | None = None) -> str:
    return _source(env).get("WEB_UI_HOST", _DEFAULT_WEB_UI_HOST)


def get_web_ui_port(env: Dict[str, str] | None = None) -> int:
    value = _read_int(env, "WEB_UI_PORT", _DEFAULT_WEB_UI_PORT)
    return value if 0 < value <= 65535 else _DEFAULT_WEB_UI_PORT
