# fleetmap/map/surface.py
# -*- coding: utf-8 -*-
"""
Map surface: the narrow rendering interface used by the selection controller.

- MapSurface: protocol any mapping toolkit adapter can satisfy
- InMemorySurface: headless implementation (projects to Web Mercator,
  records features, simulates clicks, exports GeoJSON)
- Styles: route lines (selected vs. listed) and city pins by delivery count
- popup_text(): plain-text popup content for city / route features

Feature data dicts carry a "type" key ("city" or "route") so click handlers
can tell them apart.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import (
      Any
    , Callable
    , Dict
    , Iterable
    , List
    , Optional
    , Protocol
    , Tuple
)

from fleetmap.core.types import LngLat, Polyline, XY
from fleetmap.infra.logging import get_logger

_log = get_logger(__name__)

ClickHandler = Callable[[Optional[Dict[str, Any]], Optional[LngLat]], None]

# ────────────────────────────────────────────────────────────────────────────────
# Projection (EPSG:4326 → EPSG:3857)
# ────────────────────────────────────────────────────────────────────────────────

_EARTH_RADIUS_M = 6378137.0
_MAX_LAT = 85.0511287798066


def to_web_mercator(lng: float, lat: float) -> XY:
    """Project (lng, lat) degrees to spherical Web Mercator metres."""
    lat_c = max(-_MAX_LAT, min(_MAX_LAT, float(lat)))
    x = _EARTH_RADIUS_M * math.radians(float(lng))
    y = _EARTH_RADIUS_M * math.log(math.tan(math.pi / 4.0 + math.radians(lat_c) / 2.0))
    return (x, y)


# ────────────────────────────────────────────────────────────────────────────────
# Styles
# ────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class LineStyle:
    color: str
    width: float
    line_dash: Tuple[int, ...] = ()

    @property
    def dashed(self) -> bool:
        return bool(self.line_dash)


@dataclass(frozen=True)
class PointStyle:
    color: str
    radius: int
    text: str = ""
    stroke_color: str = "#FFFFFF"
    stroke_width: float = 2.0


SELECTED_ROUTE_STYLE = LineStyle(color="#1E40AF", width=5)
LISTED_ROUTE_STYLE = LineStyle(color="#3B82F6", width=3, line_dash=(5, 5))


def route_style(is_selected: bool) -> LineStyle:
    """Solid, heavier, darker for the selected route; dashed and lighter otherwise."""
    return SELECTED_ROUTE_STYLE if is_selected else LISTED_ROUTE_STYLE


def city_style(deliveries: int) -> PointStyle:
    """Red/8px for >= 15 deliveries, orange/6px for >= 10, green/4px below."""
    if deliveries >= 15:
        color, radius = "#EF4444", 8
    elif deliveries >= 10:
        color, radius = "#F59E0B", 6
    else:
        color, radius = "#10B981", 4
    return PointStyle(color=color, radius=radius, text=str(deliveries))


def _coord(v: Any) -> str:
    try:
        return f"{float(v):.4f}"
    except (TypeError, ValueError):
        return "?"


def popup_text(data: Dict[str, Any]) -> str:
    """Popup body for a city or route feature; missing fields render as "?"."""
    kind = data.get("type")
    if kind == "city":
        return (
            f"{data.get('name', '?')} ({data.get('deliveries', 0)} deliveries)\n"
            f"Coordinates: {_coord(data.get('lat'))}, {_coord(data.get('lng'))}"
        )
    if kind == "route":
        return (
            f"Route {data.get('vehicle_id', '?')}\n"
            f"From: {data.get('start', '?')}\n"
            f"To: {data.get('end', '?')}\n"
            f"Waypoints: {data.get('waypoints', 0)}"
        )
    return ""


# ────────────────────────────────────────────────────────────────────────────────
# Interface
# ────────────────────────────────────────────────────────────────────────────────

PointSpec = Tuple[LngLat, PointStyle, Dict[str, Any]]


class MapSurface(Protocol):
    def draw_points(self, points: Iterable[PointSpec]) -> None: ...

    def draw_line(self, polyline: Polyline, style: LineStyle, data: Dict[str, Any]) -> None: ...

    def clear_lines(self) -> None: ...

    def on_feature_click(self, handler: ClickHandler) -> None: ...

    def show_popup(self, text: str, at: Optional[LngLat]) -> None: ...

    def hide_popup(self) -> None: ...

    def center_on(self, lng: float, lat: float, zoom: int) -> None: ...


# ────────────────────────────────────────────────────────────────────────────────
# Headless implementation
# ────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PointFeature:
    lng_lat: LngLat
    xy: XY
    style: PointStyle
    data: Dict[str, Any]


@dataclass(frozen=True)
class LineFeature:
    polyline: Tuple[LngLat, ...]
    coordinates: Tuple[XY, ...]
    style: LineStyle
    data: Dict[str, Any]


@dataclass
class InMemorySurface:
    """
    Records what would be drawn. Coordinates are stored both as given
    (lng, lat) and projected to EPSG:3857, the projection of the tiled basemap.
    """

    points: List[PointFeature] = field(default_factory=list)
    lines: List[LineFeature] = field(default_factory=list)
    popup: Optional[Tuple[str, Optional[LngLat]]] = None
    view: Tuple[LngLat, int] = ((0.0, 0.0), 0)
    _handlers: List[ClickHandler] = field(default_factory=list, repr=False)

    def draw_points(self, points: Iterable[PointSpec]) -> None:
        self.points = [
            PointFeature(lng_lat=ll, xy=to_web_mercator(*ll), style=style, data=dict(data))
            for ll, style, data in points
        ]
        _log.debug("surface: %d point feature(s)", len(self.points))

    def draw_line(self, polyline: Polyline, style: LineStyle, data: Dict[str, Any]) -> None:
        line = tuple((float(lng), float(lat)) for lng, lat in polyline)
        self.lines.append(
            LineFeature(
                  polyline=line
                , coordinates=tuple(to_web_mercator(lng, lat) for lng, lat in line)
                , style=style
                , data=dict(data)
            )
        )

    def clear_lines(self) -> None:
        self.lines = []

    def on_feature_click(self, handler: ClickHandler) -> None:
        self._handlers.append(handler)

    def show_popup(self, text: str, at: Optional[LngLat]) -> None:
        self.popup = (text, at)

    def hide_popup(self) -> None:
        self.popup = None

    def center_on(self, lng: float, lat: float, zoom: int) -> None:
        self.view = ((float(lng), float(lat)), int(zoom))

    # ── simulation / export ────────────────────────────────────────────────────
    def click(self, data: Optional[Dict[str, Any]], at: Optional[LngLat] = None) -> None:
        """Simulate a click on a feature (`data`) or on empty map (None)."""
        for handler in list(self._handlers):
            handler(data, at)

    def to_geojson(self) -> Dict[str, Any]:
        """FeatureCollection (lng/lat) of the drawn points and lines."""
        feats: List[Dict[str, Any]] = []
        for p in self.points:
            feats.append(
                {
                      "type": "Feature"
                    , "geometry": {"type": "Point", "coordinates": list(p.lng_lat)}
                    , "properties": {**p.data, "color": p.style.color, "radius": p.style.radius}
                }
            )
        for ln in self.lines:
            feats.append(
                {
                      "type": "Feature"
                    , "geometry": {"type": "LineString", "coordinates": [list(c) for c in ln.polyline]}
                    , "properties": {
                          **ln.data
                        , "stroke": ln.style.color
                        , "stroke-width": ln.style.width
                        , "line-dash": list(ln.style.line_dash)
                    }
                }
            )
        return {"type": "FeatureCollection", "features": feats}
