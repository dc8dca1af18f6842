# fleetmap/registry/registry.py
# -*- coding: utf-8 -*-
"""
City / route registry
=====================

Static reference data (city pins + vehicle routes) and the helpers that turn
a route into an ordered coordinate list for the directions service.

Record shapes (JSON / built-in)
-------------------------------
cities: {"name": str, "lat": float, "lng": float, "deliveries": int}
routes: {"vehicle_id": str,
         "start": str | {"lat", "lng"},
         "end":   str | {"lat", "lng"},
         "waypoints": [{"lat", "lng"}, ...]}

Notes
-----
- Invalid records are skipped with a warning; duplicate names / vehicle ids
  keep the first occurrence. A registry with no valid city raises ValueError.
- Name resolution is exact and case-sensitive.
- Coordinate order is (lng, lat) throughout, matching GeoJSON and ORS.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional, Tuple

from fleetmap.core.config import get_routing_defaults
from fleetmap.core.models import Endpoint, GeoPoint, Location, RouteDefinition
from fleetmap.core.types import CoordinateList, LngLat, StrPath
from fleetmap.infra.logging import get_logger

_log = get_logger(__name__)

__all__ = [
      "InsufficientCoordinates"
    , "Registry"
    , "default_registry"
]


class InsufficientCoordinates(Exception):
    """Raised when a route resolves to fewer points than a directions call needs."""

    def __init__(self, vehicle_id: str, resolved: int) -> None:
        super().__init__(
            f"route {vehicle_id} resolved to {resolved} point(s); at least "
            f"{get_routing_defaults().min_points} are required"
        )
        self.vehicle_id = vehicle_id
        self.resolved = resolved


# ────────────────────────────────────────────────────────────────────────────────
# Record parsing
# ────────────────────────────────────────────────────────────────────────────────

def _parse_location(raw: Dict[str, Any]) -> Optional[Location]:
    try:
        name = str(raw["name"]).strip()
        deliveries = int(raw.get("deliveries", raw.get("delivery_count", 0)) or 0)
        if not name:
            return None
        return Location(
              name=name
            , lat=float(raw["lat"])
            , lng=float(raw["lng"])
            , delivery_count=deliveries
        )
    except (KeyError, TypeError, ValueError) as exc:
        _log.warning("registry: skipping city record %r (%s)", raw, exc)
        return None


def _parse_endpoint(raw: Any) -> Endpoint:
    if isinstance(raw, GeoPoint):
        return raw
    if isinstance(raw, dict):
        return GeoPoint.from_dict(raw)
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    raise ValueError(f"invalid route endpoint {raw!r}")


def _parse_route(raw: Dict[str, Any]) -> Optional[RouteDefinition]:
    try:
        vehicle_id = str(raw.get("vehicle_id") or raw.get("vehicleNumber") or "").strip()
        if not vehicle_id:
            raise ValueError("missing vehicle_id")
        waypoints = tuple(GeoPoint.from_dict(wp) for wp in (raw.get("waypoints") or []))
        return RouteDefinition(
              vehicle_id=vehicle_id
            , start=_parse_endpoint(raw.get("start"))
            , end=_parse_endpoint(raw.get("end"))
            , waypoints=waypoints
        )
    except (KeyError, TypeError, ValueError) as exc:
        _log.warning("registry: skipping route record %r (%s)", raw, exc)
        return None


# ────────────────────────────────────────────────────────────────────────────────
# Registry
# ────────────────────────────────────────────────────────────────────────────────

class Registry:
    """
    Immutable lookup over city pins and vehicle routes.

    Build with `Registry.from_records(...)`, `Registry.from_json(path)` or
    `default_registry()`.
    """

    def __init__(
          self
        , locations: Iterable[Location]
        , routes: Iterable[RouteDefinition]
    ) -> None:
        self._locations: Dict[str, Location] = {}
        for loc in locations:
            if loc.name in self._locations:
                _log.warning("registry: duplicate city %r ignored", loc.name)
                continue
            self._locations[loc.name] = loc

        self._routes: Dict[str, RouteDefinition] = {}
        for route in routes:
            if route.vehicle_id in self._routes:
                _log.warning("registry: duplicate route %r ignored", route.vehicle_id)
                continue
            self._routes[route.vehicle_id] = route

        if not self._locations:
            raise ValueError("registry has no valid city records")

        _log.debug(
            "registry ready: cities=%d routes=%d"
            , len(self._locations)
            , len(self._routes)
        )

    # ── constructors ───────────────────────────────────────────────────────────
    @classmethod
    def from_records(
          cls
        , cities: Iterable[Dict[str, Any]]
        , routes: Iterable[Dict[str, Any]]
    ) -> "Registry":
        locs = [loc for loc in (_parse_location(r) for r in cities) if loc is not None]
        rts = [rt for rt in (_parse_route(r) for r in routes) if rt is not None]
        return cls(locs, rts)

    @classmethod
    def from_json(cls, path: StrPath) -> "Registry":
        """Load `{"cities": [...], "routes": [...]}` from a JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        _log.info("registry: loaded %s", path)
        return cls.from_records(raw.get("cities") or [], raw.get("routes") or [])

    # ── accessors ──────────────────────────────────────────────────────────────
    @property
    def locations(self) -> Tuple[Location, ...]:
        return tuple(self._locations.values())

    @property
    def routes(self) -> Tuple[RouteDefinition, ...]:
        return tuple(self._routes.values())

    def resolve_location(self, name: str) -> Optional[Location]:
        """Exact, case-sensitive lookup. Returns None when the name is unknown."""
        return self._locations.get(name)

    def find_route(self, vehicle_id: str) -> Optional[RouteDefinition]:
        return self._routes.get(vehicle_id)

    def filter_routes(self, query: str = "") -> List[RouteDefinition]:
        """Routes whose vehicle id contains `query` (case-insensitive)."""
        q = (query or "").strip().lower()
        if not q:
            return list(self._routes.values())
        return [r for r in self._routes.values() if q in r.vehicle_id.lower()]

    # ── coordinates ────────────────────────────────────────────────────────────
    def resolve_endpoint(self, ep: Endpoint) -> Optional[LngLat]:
        if isinstance(ep, GeoPoint):
            return ep.lng_lat
        loc = self.resolve_location(ep)
        return loc.lng_lat if loc is not None else None

    def coordinates_for_route(self, route: RouteDefinition) -> CoordinateList:
        """
        Ordered (lng, lat) list: start, each waypoint in order, end.

        Raises InsufficientCoordinates when the start or end does not resolve
        or fewer than two points remain; waypoints never stand in for a
        missing endpoint.
        """
        coords: CoordinateList = []

        start = self.resolve_endpoint(route.start)
        if start is None:
            _log.debug("route %s: unknown start %r", route.vehicle_id, route.start)
        else:
            coords.append(start)

        coords.extend(wp.lng_lat for wp in route.waypoints)

        end = self.resolve_endpoint(route.end)
        if end is None:
            _log.debug("route %s: unknown end %r", route.vehicle_id, route.end)
        else:
            coords.append(end)

        if start is None or end is None or len(coords) < get_routing_defaults().min_points:
            raise InsufficientCoordinates(route.vehicle_id, len(coords))
        return coords

    def route_center(self, route: RouteDefinition) -> Optional[LngLat]:
        """Midpoint of the resolved start and end, or None if either is unknown."""
        start = self.resolve_endpoint(route.start)
        end = self.resolve_endpoint(route.end)
        if start is None or end is None:
            return None
        return ((start[0] + end[0]) / 2.0, (start[1] + end[1]) / 2.0)

    # ── summaries ──────────────────────────────────────────────────────────────
    def fleet_overview(self) -> Dict[str, int]:
        return {
              "total_cities": len(self._locations)
            , "active_routes": len(self._routes)
            , "total_deliveries": sum(loc.delivery_count for loc in self._locations.values())
        }


def default_registry() -> Registry:
    """Registry built from the bundled city pins and routes."""
    from fleetmap.registry.data import CITY_PINS, CITY_ROUTES

    return Registry.from_records(CITY_PINS, CITY_ROUTES)
