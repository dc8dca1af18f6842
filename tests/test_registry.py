from __future__ import annotations

import json

import pytest

from fleetmap.core.models import GeoPoint, Location, RouteDefinition
from fleetmap.registry import (
    InsufficientCoordinates,
    Registry,
    cities_table,
    delivery_tier,
    routes_table,
)


def test_default_registry_overview(registry):
    assert registry.fleet_overview() == {
        "total_cities": 20,
        "active_routes": 20,
        "total_deliveries": 296,
    }
    # every bundled route is routable
    for route in registry.routes:
        assert len(registry.coordinates_for_route(route)) == 2 + len(route.waypoints)


def test_coordinates_are_start_waypoints_end_in_lng_lat(registry):
    route = registry.find_route("DL03IJ5678")

    coords = registry.coordinates_for_route(route)

    assert coords == [(77.2090, 28.6139), (77.0266, 28.4595), (75.7873, 26.9124)]


def test_raw_coordinate_endpoints_need_no_lookup():
    reg = Registry(
        [Location("Pune", 18.5204, 73.8567, 18)],
        [RouteDefinition("X1", GeoPoint(19.0, 72.8), "Pune", (GeoPoint(18.7, 73.4), GeoPoint(18.6, 73.6)))],
    )

    coords = reg.coordinates_for_route(reg.find_route("X1"))

    assert coords == [(72.8, 19.0), (73.4, 18.7), (73.6, 18.6), (73.8567, 18.5204)]


def test_unknown_endpoint_is_insufficient_even_with_waypoints(small_registry):
    route = small_registry.find_route("XX00NOWHERE")

    with pytest.raises(InsufficientCoordinates) as excinfo:
        small_registry.coordinates_for_route(route)

    assert excinfo.value.vehicle_id == "XX00NOWHERE"
    assert excinfo.value.resolved == 2


def test_name_resolution_is_exact(small_registry):
    assert small_registry.resolve_location("Delhi").delivery_count == 28
    assert small_registry.resolve_location("delhi") is None
    assert small_registry.resolve_location("Delhi ") is None


def test_filter_routes_is_case_insensitive_substring(registry):
    ids = [r.vehicle_id for r in registry.filter_routes("mh1")]
    assert ids == ["MH12AB1234", "MH12AB2234", "MH14MN3456"]
    assert len(registry.filter_routes("")) == 20
    assert registry.filter_routes("zz") == []


def test_route_center_is_endpoint_midpoint(small_registry):
    center = small_registry.route_center(small_registry.find_route("DL03IJ5678"))
    assert center == pytest.approx(((77.21 + 76.61) / 2, (28.61 + 26.91) / 2))
    assert small_registry.route_center(small_registry.find_route("XX00NOWHERE")) is None


def test_invalid_and_duplicate_records_are_skipped():
    reg = Registry.from_records(
        cities=[
            {"name": "Pune", "lat": 18.52, "lng": 73.85, "deliveries": 3},
            {"name": "Pune", "lat": 0, "lng": 0, "deliveries": 1},
            {"name": "Nowhere", "lat": "n/a", "lng": 1},
            {"name": "Negative", "lat": 1, "lng": 1, "deliveries": -2},
            {"lat": 1, "lng": 1},
        ],
        routes=[
            {"vehicle_id": "A", "start": "Pune", "end": {"lat": 19.0, "lng": 72.8}},
            {"vehicle_id": "A", "start": "Pune", "end": "Pune"},
            {"vehicle_id": "", "start": "Pune", "end": "Pune"},
            {"vehicle_id": "B", "start": None, "end": "Pune"},
        ],
    )

    assert [loc.name for loc in reg.locations] == ["Pune"]
    assert reg.resolve_location("Pune").lat == 18.52
    assert [r.vehicle_id for r in reg.routes] == ["A"]
    assert reg.find_route("A").end == GeoPoint(19.0, 72.8)


def test_registry_without_cities_is_rejected():
    with pytest.raises(ValueError):
        Registry.from_records(cities=[{"name": "bad"}], routes=[])


def test_from_json(tmp_path):
    path = tmp_path / "fleet.json"
    path.write_text(
        json.dumps(
            {
                "cities": [
                    {"name": "Delhi", "lat": 28.61, "lng": 77.21, "deliveries": 28},
                    {"name": "Jaipur", "lat": 26.91, "lng": 76.61, "deliveries": 13},
                ],
                "routes": [{"vehicle_id": "DL1", "start": "Delhi", "end": "Jaipur"}],
            }
        ),
        encoding="utf-8",
    )

    reg = Registry.from_json(path)

    assert reg.coordinates_for_route(reg.find_route("DL1")) == [(77.21, 28.61), (76.61, 26.91)]


@pytest.mark.parametrize("deliveries, tier", [(28, "high"), (15, "high"), (14, "medium"), (10, "medium"), (9, "low")])
def test_delivery_tier(deliveries, tier):
    assert delivery_tier(deliveries) == tier


def test_tables(small_registry):
    cities = cities_table(small_registry)
    assert list(cities.columns) == ["name", "lat", "lng", "deliveries", "tier"]
    assert cities.set_index("name").loc["Jaipur", "tier"] == "medium"

    routes = routes_table(small_registry).set_index("vehicle_id")
    assert routes.loc["MH12AB1234", "n_points"] == 3
    assert bool(routes.loc["XX00NOWHERE", "routable"]) is False
    assert routes.loc["XX00NOWHERE", "n_points"] == 0

    filtered = routes_table(small_registry, "dl")
    assert list(filtered["vehicle_id"]) == ["DL03IJ5678"]
