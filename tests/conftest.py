# tests/conftest.py
from __future__ import annotations

from typing import List

import pytest

from fleetmap.app.selection import RouteSelectionController
from fleetmap.map.surface import InMemorySurface
from fleetmap.registry import Registry, default_registry


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """No real keys or key files leak into tests."""
    for var in ("ORS_API_KEY", "FLEETMAP_ORS_API_KEY", "ORS_BASE_URL", "FLEETMAP_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("FLEETMAP_KEY_FILE", str(tmp_path / "ors_key.json"))


@pytest.fixture
def registry() -> Registry:
    return default_registry()


@pytest.fixture
def small_registry() -> Registry:
    """Delhi/Jaipur with rounded coordinates plus routes with unknown endpoints."""
    return Registry.from_records(
        cities=[
            {"name": "Delhi", "lat": 28.61, "lng": 77.21, "deliveries": 28},
            {"name": "Jaipur", "lat": 26.91, "lng": 76.61, "deliveries": 13},
            {"name": "Pune", "lat": 18.5204, "lng": 73.8567, "deliveries": 18},
            {"name": "Mumbai", "lat": 19.0760, "lng": 72.8777, "deliveries": 25},
        ],
        routes=[
            {"vehicle_id": "DL03IJ5678", "start": "Delhi", "end": "Jaipur", "waypoints": []},
            {
                "vehicle_id": "MH12AB1234",
                "start": "Pune",
                "end": "Mumbai",
                "waypoints": [{"lat": 18.6298, "lng": 73.7997}],
            },
            {
                "vehicle_id": "XX00NOWHERE",
                "start": "Atlantis",
                "end": "Mumbai",
                "waypoints": [{"lat": 18.6298, "lng": 73.7997}],
            },
        ],
    )


@pytest.fixture
def surface() -> InMemorySurface:
    return InMemorySurface()


@pytest.fixture
def make_controller(surface):
    created: List[RouteSelectionController] = []

    def _make(registry: Registry, fetcher, **kwargs) -> RouteSelectionController:
        ctl = RouteSelectionController(registry, surface, fetcher=fetcher, **kwargs)
        created.append(ctl)
        return ctl

    yield _make
    for ctl in created:
        ctl.close()
