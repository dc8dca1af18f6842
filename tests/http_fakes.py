from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import requests


@dataclass
class FakeResponse:
    status_code: int = 200
    json_data: Any = None
    text: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    raise_on_json: bool = False

    def json(self) -> Any:
        if self.raise_on_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.json_data

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:
    """Stands in for requests.Session; replays queued responses or exceptions."""

    def __init__(self, responses: list[FakeResponse | Exception] | None = None) -> None:
        self._responses = list(responses or [])
        self.requests: list[dict[str, Any]] = []
        self.closed = False

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.requests.append({"method": method, "url": url, **kwargs})
        if not self._responses:
            raise AssertionError("No fake responses available")
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        self.closed = True


def geojson_route(coords: list[list[float]]) -> dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": {"type": "LineString", "coordinates": coords},
                "properties": {"summary": {"distance": 1000.0, "duration": 60.0}},
            }
        ],
    }
