from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from app.web_api import create_app
from core.errors import NetworkError, NotFoundError
from core.weather_pipeline import WeatherPipeline
from core.weather_records import LocationRecord, WeatherRecord


class StubProvider:
    def __init__(self) -> None:
        self.resolved: list[str] = []
        self.fetched: list[tuple[float, float]] = []

    def resolve(self, name: str) -> LocationRecord:
        self.resolved.append(name)
        if name == "Atlantis":
            raise NotFoundError(name)
        return LocationRecord(display_name=name, country="India", latitude=12.97194, longitude=77.59369)

    def fetch(self, lat: float, lon: float) -> WeatherRecord:
        self.fetched.append((lat, lon))
        if lat == 66.6:
            raise NetworkError()
        return WeatherRecord(temperature_c=21.04, wind_speed_kmh=5.5, weather_code=45, observed_at="2026-10-19T07:45")


def build_client(tmp_path: Path, provider: StubProvider | None = None) -> tuple[TestClient, StubProvider]:
    provider = provider or StubProvider()
    static_dir = tmp_path / "static"
    static_dir.mkdir()
    (static_dir / "index.html").write_text("<html><body>weather</body></html>", encoding="utf-8")
    app = create_app(
        WeatherPipeline(resolver=provider.resolve, fetcher=provider.fetch),
        static_dir=static_dir,
        preset_cities=["Bengaluru", "Atlantis", "Pune"],
        default_city="Pune",
    )
    return TestClient(app), provider


def test_root_serves_index(tmp_path):
    client, _ = build_client(tmp_path)

    response = client.get("/")

    assert response.status_code == 200
    assert "weather" in response.text


def test_root_without_assets_is_404(tmp_path):
    app = create_app(WeatherPipeline(resolver=StubProvider().resolve, fetcher=StubProvider().fetch), static_dir=tmp_path / "missing")
    client = TestClient(app)

    assert client.get("/").status_code == 404


def test_health_check(tmp_path):
    client, _ = build_client(tmp_path)

    body = client.get("/api/health").json()

    assert body["status"] == "ok"


def test_settings_expose_default_and_presets(tmp_path):
    client, _ = build_client(tmp_path)

    body = client.get("/api/settings").json()

    assert body == {"default_city": "Pune", "preset_cities": ["Bengaluru", "Atlantis", "Pune"]}


def test_city_weather_returns_card(tmp_path):
    client, provider = build_client(tmp_path)

    response = client.get("/api/weather", params={"city": "  Bengaluru "})

    assert response.status_code == 200
    card = response.json()
    assert provider.resolved == ["Bengaluru"]
    assert card["title"] == "Bengaluru, India"
    assert card["meta"] == "Coordinates: 12.972, 77.594"
    assert card["temperature"] == "21.0 °C"
    assert card["description"] == "Fog"
    assert card["wind_box"] == "5.5 km/h"
    assert card["time_box"] == "2026-10-19 07:45"
    assert card["is_error"] is False


def test_city_weather_not_found_is_degraded_card(tmp_path):
    client, provider = build_client(tmp_path)

    response = client.get("/api/weather", params={"city": "Atlantis"})

    assert response.status_code == 200
    card = response.json()
    assert card["is_error"] is True
    assert card["error_kind"] == "NotFoundError"
    assert card["temperature"] == "— °C"
    assert provider.fetched == []


def test_blank_city_is_rejected(tmp_path):
    client, provider = build_client(tmp_path)

    response = client.get("/api/weather", params={"city": "   "})

    assert response.status_code == 400
    assert response.json()["detail"] == "Please type a city name."
    assert provider.resolved == []


def test_location_weather_uses_coordinates_only(tmp_path):
    client, provider = build_client(tmp_path)

    response = client.post("/api/weather/location", json={"latitude": 0, "longitude": 0})

    card = response.json()
    assert card["title"] == "Your location"
    assert card["meta"] == "Coordinates: 0.000, 0.000"
    assert provider.resolved == []
    assert provider.fetched == [(0.0, 0.0)]


def test_location_error_reported_by_browser(tmp_path):
    client, provider = build_client(tmp_path)

    response = client.post("/api/weather/location", json={"error": "User denied Geolocation"})

    card = response.json()
    assert response.status_code == 200
    assert card["error_kind"] == "LocationUnavailableError"
    assert card["title"] == "Location unavailable"
    assert provider.fetched == []


def test_location_network_failure_is_degraded_card(tmp_path):
    client, _ = build_client(tmp_path)

    card = client.post("/api/weather/location", json={"latitude": 66.6, "longitude": 10}).json()

    assert card["is_error"] is True
    assert card["error_kind"] == "NetworkError"
    assert card["title"] == "Your location"
    assert card["meta"] == "Unable to fetch weather for your location."
    assert card["temperature"] == "— °C"


def test_presets_isolate_failures(tmp_path):
    client, _ = build_client(tmp_path)

    rows = client.get("/api/presets").json()["rows"]

    assert [row["degraded"] for row in rows] == [False, True, False]
    assert rows[1]["city"] == "Atlantis"
    assert rows[1]["notice"] == "Could not load"
    assert rows[0]["city"] == "Bengaluru, India"
    assert rows[0]["temperature"] == "21.0"
