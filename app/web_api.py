"""FastAPI application serving the weather widget and its JSON endpoints."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from app.config import get_default_city, get_preset_cities
from app.main import build_pipeline, city_card, coordinates_card
from core.errors import LocationUnavailableError
from core.render import render_city_rows, render_error
from core.weather_pipeline import WeatherPipeline

logger = logging.getLogger(__name__)
STATIC_DIR = Path(__file__).resolve().parent.parent / "web" / "static"


class LocationPayload(BaseModel):
    """Position reported by the browser, or the reason it could not get one."""

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    error: Optional[str] = None


def create_app(
    pipeline: Optional[WeatherPipeline] = None,
    *,
    static_dir: Optional[Path] = None,
    preset_cities: Optional[List[str]] = None,
    default_city: Optional[str] = None,
) -> FastAPI:
    """Build the app; tests pass a pipeline with fake resolver/fetcher.

    Lookup failures never become HTTP errors: every weather route answers with
    a card, degraded when the lookup failed, so the page always has something
    to draw. Only a blank city query is rejected with 400.
    """
    app = FastAPI(title="City Weather Widget", version="1.0.0")
    app.state.pipeline = pipeline or build_pipeline()
    app.state.static_root = static_dir or STATIC_DIR
    app.state.preset_cities = list(preset_cities) if preset_cities is not None else get_preset_cities()
    app.state.default_city = default_city or get_default_city()

    app.mount("/static", StaticFiles(directory=app.state.static_root, check_dir=False), name="static")

    @app.get("/", response_class=HTMLResponse)
    def root() -> str:
        index_path = app.state.static_root / "index.html"
        if not index_path.exists():
            raise HTTPException(status_code=404, detail="Web UI assets are missing.")
        return index_path.read_text(encoding="utf-8")

    @app.get("/api/health")
    def health_check() -> Dict[str, Any]:
        return {
            "status": "ok",
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        }

    @app.get("/api/settings")
    def settings() -> Dict[str, Any]:
        return {
            "default_city": app.state.default_city,
            "preset_cities": list(app.state.preset_cities),
        }

    @app.get("/api/weather")
    def city_weather(city: str = "") -> Dict[str, Any]:
        """Current weather card for ``city``."""

        clean = city.strip()
        if not clean:
            raise HTTPException(status_code=400, detail="Please type a city name.")
        return city_card(app.state.pipeline, clean).to_dict()

    @app.post("/api/weather/location")
    def location_weather(payload: LocationPayload) -> Dict[str, Any]:
        """Current weather card for a browser-reported position.

        The browser posts ``error`` instead of coordinates when geolocation is
        denied or unsupported; that yields the location-unavailable notice
        without calling the provider.
        """

        if payload.error or payload.latitude is None or payload.longitude is None:
            if payload.error:
                logger.info("Browser reported geolocation failure: %s", payload.error)
            return render_error(LocationUnavailableError(), lookup="coordinates").to_dict()
        return coordinates_card(app.state.pipeline, payload.latitude, payload.longitude).to_dict()

    @app.get("/api/presets")
    def presets() -> Dict[str, Any]:
        rows = app.state.pipeline.lookup_preset_cities(app.state.preset_cities)
        return {"rows": render_city_rows(rows)}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    from app.config import get_web_ui_host, get_web_ui_port

    uvicorn.run(
        "app.web_api:app",
        host=get_web_ui_host(),
        port=get_web_ui_port(),
        reload=False,
    )
