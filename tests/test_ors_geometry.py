from __future__ import annotations

import pytest
import requests

from fleetmap.road import (
    GeometryFetchError,
    MissingApiKey,
    NoGeometry,
    NoRoute,
    ORSClient,
    ORSConfig,
    RateLimited,
    fetch_route_geometry,
)
from fleetmap.road.ors_mixins import extract_polyline
from http_fakes import FakeResponse, FakeSession, geojson_route

COORDS = [(77.2090, 28.6139), (75.7873, 26.9124)]
ROAD = [[77.2090, 28.6139], [76.9, 28.1], [76.2, 27.4], [75.7873, 26.9124]]


def test_fetch_posts_ordered_coordinates_with_key_and_no_instructions():
    session = FakeSession([FakeResponse(json_data=geojson_route(ROAD))])

    line = fetch_route_geometry(COORDS, "secret-key", session=session)

    assert line == [tuple(pt) for pt in ROAD]
    assert len(session.requests) == 1
    req = session.requests[0]
    assert req["method"] == "POST"
    assert req["url"] == "https://api.openrouteservice.org/v2/directions/driving-car/geojson"
    assert req["json"] == {"coordinates": [[77.2090, 28.6139], [75.7873, 26.9124]], "instructions": False}
    assert req["headers"]["Authorization"] == "secret-key"
    assert req["timeout"] is None


def test_fetch_keeps_waypoint_order():
    coords = [(73.8567, 18.5204), (73.7997, 18.6298), (72.8777, 19.0760)]
    session = FakeSession([FakeResponse(json_data=geojson_route([list(c) for c in coords]))])

    fetch_route_geometry(coords, "k", session=session)

    assert session.requests[0]["json"]["coordinates"] == [list(c) for c in coords]


def test_base_url_from_env(monkeypatch):
    monkeypatch.setenv("ORS_BASE_URL", "http://ors.local:8080/ors/")
    session = FakeSession([FakeResponse(json_data=geojson_route(ROAD))])

    fetch_route_geometry(COORDS, "k", session=session)

    assert session.requests[0]["url"] == "http://ors.local:8080/ors/v2/directions/driving-car/geojson"


def test_explicit_base_url_wins_over_env(monkeypatch):
    monkeypatch.setenv("ORS_BASE_URL", "http://ignored")
    session = FakeSession([FakeResponse(json_data=geojson_route(ROAD))])

    fetch_route_geometry(COORDS, "k", base_url="http://ors.example", session=session)

    assert session.requests[0]["url"].startswith("http://ors.example/v2/")


@pytest.mark.parametrize(
    "response, cause",
    [
        (FakeResponse(status_code=500, json_data={"error": "boom"}), requests.HTTPError),
        (FakeResponse(status_code=403, json_data={"error": "Access to this API has been disallowed"}), requests.HTTPError),
        (FakeResponse(status_code=429, json_data={"error": "Rate limit exceeded"}), RateLimited),
        (FakeResponse(status_code=404, json_data={"error": {"code": 2010}}), NoRoute),
        (FakeResponse(status_code=200, text="<html>", raise_on_json=True), ValueError),
        (FakeResponse(status_code=200, json_data={"type": "FeatureCollection", "features": []}), NoGeometry),
        (FakeResponse(status_code=200, json_data={"features": [{"geometry": {}}]}), NoGeometry),
    ],
)
def test_failures_surface_as_geometry_fetch_error(response, cause):
    session = FakeSession([response])

    with pytest.raises(GeometryFetchError) as excinfo:
        fetch_route_geometry(COORDS, "k", session=session)

    assert isinstance(excinfo.value.__cause__, cause)
    assert len(session.requests) == 1


def test_network_error_surfaces_as_geometry_fetch_error():
    session = FakeSession([requests.ConnectionError("connection refused")])

    with pytest.raises(GeometryFetchError) as excinfo:
        fetch_route_geometry(COORDS, "k", session=session)

    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


@pytest.mark.parametrize("key", ["", "   "])
def test_empty_key_is_rejected_even_with_env_key(monkeypatch, key):
    monkeypatch.setenv("ORS_API_KEY", "env-key")
    session = FakeSession([FakeResponse(json_data=geojson_route(ROAD))])

    with pytest.raises(MissingApiKey):
        fetch_route_geometry(COORDS, key, session=session)

    assert session.requests == []


def test_timeout_is_passed_to_the_request():
    session = FakeSession([FakeResponse(json_data=geojson_route(ROAD))])

    fetch_route_geometry(COORDS, "k", session=session, timeout_s=7.5)

    assert session.requests[0]["timeout"] == 7.5


def test_config_reads_key_from_env(monkeypatch):
    monkeypatch.setenv("ORS_API_KEY", "  env-key  ")
    cfg = ORSConfig()
    assert cfg.api_key == "env-key"
    assert cfg.default_profile == "driving-car"
    assert cfg.timeout_s is None


def test_injected_session_is_not_closed_by_client():
    session = FakeSession([FakeResponse(json_data=geojson_route(ROAD))])
    with ORSClient(ORSConfig(api_key="k"), session=session) as client:
        client.route_geometry(COORDS, profile="driving-hgv")

    assert session.closed is False
    assert "/v2/directions/driving-hgv/geojson" in session.requests[0]["url"]


def test_extract_polyline_rejects_non_numeric_points():
    with pytest.raises(NoGeometry):
        extract_polyline(geojson_route([[77.2, 28.6], ["x", None]]))
