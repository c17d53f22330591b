from pathlib import Path

from app import config


def test_defaults_without_environment():
    env = {}
    assert config.get_geocoding_url(env) == "https://geocoding-api.open-meteo.com/v1/search"
    assert config.get_forecast_url(env) == "https://api.open-meteo.com/v1/forecast"
    assert config.get_http_timeout(env) == 10.0
    assert config.get_preset_cities(env) == ["Bengaluru", "Kolkata", "Hyderabad", "Pune", "Ahmedabad"]
    assert config.get_default_city(env) == "Bengaluru"
    assert config.get_preset_max_workers(env) == 1
    assert config.is_lookup_logging_enabled(env) is True
    assert config.get_lookup_log_path(env) == Path("logs") / "lookups.jsonl"
    assert config.get_web_ui_port(env) == 9000


def test_preset_cities_are_parsed_from_comma_list():
    env = {"PRESET_CITIES": " Oslo, ,Bergen ,Tromsø"}
    assert config.get_preset_cities(env) == ["Oslo", "Bergen", "Tromsø"]


def test_blank_preset_list_falls_back_to_defaults():
    assert config.get_preset_cities({"PRESET_CITIES": " , "})[0] == "Bengaluru"


def test_invalid_values_fall_back():
    env = {
        "HTTP_TIMEOUT_SECONDS": "soon",
        "PRESET_MAX_WORKERS": "-3",
        "LOG_MAX_BYTES": "big",
        "LOG_COORDINATE_PRECISION": "12",
        "WEB_UI_PORT": "70000",
        "LOOKUP_LOGGING_ENABLED": "maybe",
    }
    assert config.get_http_timeout(env) == 10.0
    assert config.get_preset_max_workers(env) == 1
    assert config.get_log_max_bytes(env) == 1_000_000
    assert config.get_log_coordinate_precision(env) == 6
    assert config.get_web_ui_port(env) == 9000
    assert config.is_lookup_logging_enabled(env) is True


def test_overrides_are_honoured(tmp_path):
    env = {
        "HTTP_TIMEOUT_SECONDS": "2.5",
        "LOG_DIR": str(tmp_path),
        "LOOKUP_LOGGING_ENABLED": "off",
        "DEFAULT_CITY": " Pune ",
        "LOG_LEVEL": "debug",
    }
    assert config.get_http_timeout(env) == 2.5
    assert config.get_lookup_log_path(env) == tmp_path / "lookups.jsonl"
    assert config.is_lookup_logging_enabled(env) is False
    assert config.get_default_city(env) == "Pune"
    assert config.get_log_level(env) == "DEBUG"
