from __future__ import annotations

import pytest

from fleetmap.map.surface import (
    LISTED_ROUTE_STYLE,
    SELECTED_ROUTE_STYLE,
    InMemorySurface,
    city_style,
    popup_text,
    route_style,
    to_web_mercator,
)


def test_web_mercator_projection():
    assert to_web_mercator(0.0, 0.0) == pytest.approx((0.0, 0.0), abs=1e-6)
    x, y = to_web_mercator(180.0, 0.0)
    assert x == pytest.approx(20037508.34, rel=1e-9)
    # Delhi
    x, y = to_web_mercator(77.2090, 28.6139)
    assert x == pytest.approx(8594867.0, rel=1e-3)
    assert y == pytest.approx(3326645.0, rel=1e-3)
    # poles are clamped to the square world extent
    assert to_web_mercator(0.0, 90.0)[1] == pytest.approx(to_web_mercator(180.0, 0.0)[0], rel=1e-6)


def test_route_styles_distinguish_selected_from_listed():
    assert route_style(True) is SELECTED_ROUTE_STYLE
    assert route_style(False) is LISTED_ROUTE_STYLE
    assert LISTED_ROUTE_STYLE.dashed and not SELECTED_ROUTE_STYLE.dashed
    assert SELECTED_ROUTE_STYLE.width > LISTED_ROUTE_STYLE.width


@pytest.mark.parametrize(
    "deliveries, color, radius",
    [(28, "#EF4444", 8), (15, "#EF4444", 8), (13, "#F59E0B", 6), (10, "#F59E0B", 6), (6, "#10B981", 4)],
)
def test_city_style(deliveries, color, radius):
    style = city_style(deliveries)
    assert (style.color, style.radius, style.text) == (color, radius, str(deliveries))


def test_popup_text():
    city = {"type": "city", "name": "Pune", "lat": 18.5204, "lng": 73.8567, "deliveries": 18}
    assert popup_text(city) == "Pune (18 deliveries)\nCoordinates: 18.5204, 73.8567"

    route = {"type": "route", "vehicle_id": "MH12AB1234", "start": "Pune", "end": "Mumbai", "waypoints": 1}
    assert popup_text(route).splitlines() == ["Route MH12AB1234", "From: Pune", "To: Mumbai", "Waypoints: 1"]

    assert popup_text({"type": "other"}) == ""


def test_in_memory_surface_records_and_exports():
    surface = InMemorySurface()
    surface.draw_points([((73.8567, 18.5204), city_style(18), {"type": "city", "name": "Pune"})])
    surface.draw_line([(73.85, 18.52), (72.87, 19.07)], LISTED_ROUTE_STYLE, {"type": "route", "vehicle_id": "A"})

    assert surface.lines[0].coordinates[0] == to_web_mercator(73.85, 18.52)

    fc = surface.to_geojson()
    assert fc["type"] == "FeatureCollection"
    point, line = fc["features"]
    assert point["geometry"] == {"type": "Point", "coordinates": [73.8567, 18.5204]}
    assert point["properties"]["color"] == "#EF4444"
    assert line["geometry"]["type"] == "LineString"
    assert line["properties"]["line-dash"] == [5, 5]

    surface.clear_lines()
    assert surface.lines == []
    assert len(surface.points) == 1


def test_click_dispatches_to_registered_handlers():
    surface = InMemorySurface()
    seen = []
    surface.on_feature_click(lambda data, at: seen.append((data, at)))

    surface.click({"type": "city", "name": "Pune"}, at=(73.85, 18.52))
    surface.click(None)

    assert seen == [({"type": "city", "name": "Pune"}, (73.85, 18.52)), (None, None)]
