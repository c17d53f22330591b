from __future__ import annotations

from typing import Any, Dict, List

import pytest
import requests


class FakeResponse:
    def __init__(self, payload: Any = None, status_code: int = 200, *, invalid_json: bool = False) -> None:
        self._payload = payload
        self.status_code = status_code
        self._invalid_json = invalid_json

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """Stands in for ``requests.Session``; answers by URL prefix."""

    def __init__(self) -> None:
        self.routes: Dict[str, Any] = {}
        self.calls: List[Dict[str, Any]] = []

    def route(self, url: str, response: Any) -> None:
        self.routes[url] = response

    def get(self, url: str, params: Dict[str, Any] | None = None, timeout: float | None = None) -> FakeResponse:
        self.calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        response = self.routes.get(url)
        if response is None:
            raise requests.ConnectionError(f"no route for {url}")
        if isinstance(response, Exception):
            raise response
        return response

    def urls(self) -> List[str]:
        return [call["url"] for call in self.calls]


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()
