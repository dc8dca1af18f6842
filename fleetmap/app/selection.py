# fleetmap/app/selection.py
# -*- coding: utf-8 -*-
"""
Route selection controller.

Owns the "which route is selected" state, derives the coordinate list for a
route from the registry, asks the geometry fetcher for the road polyline and
decides what the map surface draws.

State machine (per selection)
-----------------------------
IDLE         nothing selected, nothing drawn
RESOLVING    fetch in flight for the selected route
AVAILABLE    polyline drawn with the selected style
UNAVAILABLE  nothing drawn; reason is NO_KEY, INSUFFICIENT_POINTS or
             FETCH_FAILED and is surfaced as status text

Notes
-----
• Every selection change (and every bulk load) bumps a generation counter
  and clears the drawn lines. A fetch applies its outcome only if its
  generation is still current; late results are dropped (last selection wins).
• There is no straight-line fallback: without real road geometry no line is
  drawn at all.
• Fetch failures never leave this class; they become UNAVAILABLE states.
• Fetches run on a small thread pool. One re-entrant lock guards the
  counter, the state snapshot and all surface mutations.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait as _wait_futures
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import (
      Any
    , Callable
    , Dict
    , Iterable
    , List
    , Mapping
    , Optional
    , Sequence
    , Tuple
    , Union
)

from fleetmap.app.key_store import ApiKeyStore
from fleetmap.core.config import MapDefaults, get_map_defaults, get_routing_defaults
from fleetmap.core.models import RouteDefinition, endpoint_label
from fleetmap.core.types import CoordinateList, LngLat
from fleetmap.infra.logging import get_logger
from fleetmap.map.surface import MapSurface, city_style, popup_text, route_style
from fleetmap.registry.registry import InsufficientCoordinates, Registry
from fleetmap.road.geometry import GeometryFetchError, fetch_route_geometry

_log = get_logger(__name__)

Fetcher = Callable[[CoordinateList, str], Sequence[LngLat]]


# ────────────────────────────────────────────────────────────────────────────────
# Results and state
# ────────────────────────────────────────────────────────────────────────────────

class GeometryState(str, Enum):
    UNKNOWN = "unknown"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class UnavailableReason(str, Enum):
    NO_KEY = "no_key"
    INSUFFICIENT_POINTS = "insufficient_points"
    FETCH_FAILED = "fetch_failed"


class RouteStatus(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class GeometryResult:
    """Outcome of resolving one route's geometry."""

    state: GeometryState = GeometryState.UNKNOWN
    polyline: Tuple[LngLat, ...] = ()
    reason: Optional[UnavailableReason] = None

    @classmethod
    def unknown(cls) -> "GeometryResult":
        return cls()

    @classmethod
    def available(cls, polyline: Iterable[LngLat]) -> "GeometryResult":
        return cls(
              state=GeometryState.AVAILABLE
            , polyline=tuple((float(lng), float(lat)) for lng, lat in polyline)
        )

    @classmethod
    def unavailable(cls, reason: UnavailableReason) -> "GeometryResult":
        return cls(state=GeometryState.UNAVAILABLE, reason=reason)

    @property
    def is_available(self) -> bool:
        return self.state is GeometryState.AVAILABLE


_STATUS_TEXT = {
      RouteStatus.IDLE: "Select a route to load its road geometry."
    , RouteStatus.RESOLVING: "Fetching road geometry…"
    , UnavailableReason.NO_KEY: "No ORS API key configured; road geometry is unavailable."
    , UnavailableReason.INSUFFICIENT_POINTS: "Not enough known points on this route to request road geometry."
    , UnavailableReason.FETCH_FAILED: "Road geometry could not be fetched for this route."
}


@dataclass(frozen=True)
class SelectionState:
    """
    Immutable snapshot of the controller.

    Attributes
    ----------
    selected : RouteDefinition | None
        Current selection (None = list view).
    generation : int
        Selection generation this snapshot belongs to.
    result : GeometryResult
        Geometry of the selected route (UNKNOWN while resolving or idle).
    list_results : Mapping[str, GeometryResult]
        Per-route outcomes of the last bulk load (list view only).
    """

    selected: Optional[RouteDefinition] = None
    generation: int = 0
    result: GeometryResult = field(default_factory=GeometryResult)
    list_results: Mapping[str, GeometryResult] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def status(self) -> RouteStatus:
        if self.selected is None:
            return RouteStatus.IDLE
        if self.result.state is GeometryState.AVAILABLE:
            return RouteStatus.AVAILABLE
        if self.result.state is GeometryState.UNAVAILABLE:
            return RouteStatus.UNAVAILABLE
        return RouteStatus.RESOLVING

    @property
    def status_text(self) -> str:
        status = self.status
        if status is RouteStatus.AVAILABLE:
            return f"Road geometry loaded ({len(self.result.polyline)} points)."
        if status is RouteStatus.UNAVAILABLE:
            return _STATUS_TEXT[self.result.reason]
        return _STATUS_TEXT[status]


# ────────────────────────────────────────────────────────────────────────────────
# Controller
# ────────────────────────────────────────────────────────────────────────────────

class RouteSelectionController:
    """
    Mediates between selection state and what is fetched and drawn.

    Parameters
    ----------
    registry : Registry
        Source of routes and city pins.
    surface : MapSurface
        Rendering collaborator; the controller registers its click handler.
    fetcher : callable
        `fetcher(coordinates, api_key) -> polyline`; raises on failure.
    key_store : ApiKeyStore | None
        Key source. If None, an in-memory store seeded with `api_key`.
    api_key : str | None
        Convenience for an in-memory key store.
    executor : ThreadPoolExecutor | None
        Pool for fetches. If None, the controller owns a private pool.
    """

    def __init__(
          self
        , registry: Registry
        , surface: MapSurface
        , *
        , fetcher: Fetcher = fetch_route_geometry
        , key_store: Optional[ApiKeyStore] = None
        , api_key: Optional[str] = None
        , executor: Optional[ThreadPoolExecutor] = None
        , map_defaults: Optional[MapDefaults] = None
    ) -> None:
        self._registry = registry
        self._surface = surface
        self._fetcher = fetcher
        self._keys = key_store or ApiKeyStore(configured_key=api_key or "")
        self._view = map_defaults or get_map_defaults()

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
              max_workers=get_routing_defaults().bulk_workers
            , thread_name_prefix="route-geometry"
        )

        self._lock = threading.RLock()
        self._generation = 0
        self._state = SelectionState()
        self._pending: List[Future] = []
        self._closed = False

        surface.on_feature_click(self.handle_feature_click)

    # ── lifecycle ──────────────────────────────────────────────────────────────
    def close(self, *, wait: bool = True) -> None:
        """
        Stop the private pool. `wait=False` returns at once: queued fetches are
        cancelled and a fetch already running finishes in the background.
        Later calls are no-ops.
        """
        if self._closed:
            return
        self._closed = True
        if self._owns_executor:
            self._executor.shutdown(wait=wait, cancel_futures=True)

    def __enter__(self) -> "RouteSelectionController":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ── state ──────────────────────────────────────────────────────────────────
    @property
    def state(self) -> SelectionState:
        with self._lock:
            return self._state

    @property
    def key_source(self) -> str:
        return self._keys.source

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until every fetch submitted so far has finished. True if all did."""
        with self._lock:
            pending = list(self._pending)
        _, not_done = _wait_futures(pending, timeout=timeout)
        return not not_done

    # ── map setup ──────────────────────────────────────────────────────────────
    def load_city_pins(self) -> None:
        points = [
            (
                  loc.lng_lat
                , city_style(loc.delivery_count)
                , {
                      "type": "city"
                    , "name": loc.name
                    , "lat": loc.lat
                    , "lng": loc.lng
                    , "deliveries": loc.delivery_count
                }
            )
            for loc in self._registry.locations
        ]
        with self._lock:
            self._surface.draw_points(points)
            self._surface.center_on(self._view.center_lng, self._view.center_lat, self._view.zoom)
        _log.info("city pins loaded: %d", len(points))

    # ── selection ──────────────────────────────────────────────────────────────
    def select(
          self
        , route: Union[RouteDefinition, str, None]
    ) -> Optional[Future]:
        """
        Change the selection and start resolving its geometry.

        Returns the fetch future when a request was started (it completes
        after the outcome has been applied or discarded), else None: the
        state is already final (IDLE or UNAVAILABLE).

        Raises KeyError for an unknown vehicle id.
        """
        route = self._lookup(route)

        with self._lock:
            gen = self._bump()

            if route is None:
                self._state = SelectionState(generation=gen)
                self._surface.hide_popup()
                self._surface.center_on(self._view.center_lng, self._view.center_lat, self._view.zoom)
                _log.info("selection cleared (gen=%d)", gen)
                return None

            center = self._registry.route_center(route)
            if center is not None:
                self._surface.center_on(center[0], center[1], self._view.selected_zoom)

            key = self._keys.current()
            prepared = self._prepare(route, key)
            if isinstance(prepared, GeometryResult):
                self._state = SelectionState(selected=route, generation=gen, result=prepared)
                _log.info(
                    "route %s selected (gen=%d): geometry unavailable (%s)"
                    , route.vehicle_id
                    , gen
                    , prepared.reason.value
                )
                return None

            self._state = SelectionState(selected=route, generation=gen)
            _log.info("route %s selected (gen=%d): resolving %d point(s)", route.vehicle_id, gen, len(prepared))
            fut = self._executor.submit(self._resolve_selected, gen, route, prepared, key)
            self._track(fut)
            return fut

    def toggle(self, route: Union[RouteDefinition, str]) -> Optional[Future]:
        """Select `route`, or clear the selection if it is already selected."""
        route = self._lookup(route)
        with self._lock:
            current = self._state.selected
            if current is not None and route is not None and current.vehicle_id == route.vehicle_id:
                return self.select(None)
            return self.select(route)

    def set_api_key(self, key: str, *, persist: bool = True) -> Optional[Future]:
        """
        Store a new key and re-resolve the selected route only.

        The bulk list is not re-fetched.
        """
        self._keys.save(key, persist=persist)
        with self._lock:
            current = self._state.selected
            if current is None:
                _log.info("API key updated (source=%s); nothing selected", self._keys.source)
                return None
            _log.info("API key updated (source=%s); re-resolving %s", self._keys.source, current.vehicle_id)
            return self.select(current)

    def handle_feature_click(
          self
        , data: Optional[Dict[str, Any]]
        , at: Optional[LngLat] = None
    ) -> None:
        """Map click: popup for the feature; a route feature becomes the selection."""
        if not data:
            with self._lock:
                self._surface.hide_popup()
            return

        with self._lock:
            self._surface.show_popup(popup_text(data), at)

        if data.get("type") == "route":
            route = self._registry.find_route(str(data.get("vehicle_id")))
            if route is None:
                _log.warning("clicked route %r is not in the registry", data.get("vehicle_id"))
                return
            self.select(route)

    # ── bulk path ──────────────────────────────────────────────────────────────
    def load_routes(
          self
        , routes: Optional[Iterable[RouteDefinition]] = None
    ) -> List[Future]:
        """
        Resolve and draw every route of the list view (default: all routes).

        Only runs while nothing is selected. Same skip/fetch rules per route as
        a selection; lines use the listed (dashed) style.
        """
        with self._lock:
            if self._state.selected is not None:
                _log.debug("bulk load skipped: %s is selected", self._state.selected.vehicle_id)
                return []

            gen = self._bump()
            todo = list(routes) if routes is not None else list(self._registry.routes)
            key = self._keys.current()

            results: Dict[str, GeometryResult] = {}
            jobs: List[Tuple[RouteDefinition, CoordinateList]] = []
            for route in todo:
                prepared = self._prepare(route, key)
                if isinstance(prepared, GeometryResult):
                    results[route.vehicle_id] = prepared
                else:
                    results[route.vehicle_id] = GeometryResult.unknown()
                    jobs.append((route, prepared))

            self._state = SelectionState(generation=gen, list_results=MappingProxyType(results))
            _log.info("bulk load (gen=%d): %d route(s), %d fetch(es)", gen, len(todo), len(jobs))

            futures = [
                self._executor.submit(self._resolve_listed, gen, route, coords, key)
                for route, coords in jobs
            ]
            for fut in futures:
                self._track(fut)
            return futures

    # ── internals ──────────────────────────────────────────────────────────────
    def _lookup(self, route: Union[RouteDefinition, str, None]) -> Optional[RouteDefinition]:
        if route is None or isinstance(route, RouteDefinition):
            return route
        found = self._registry.find_route(route)
        if found is None:
            raise KeyError(f"unknown vehicle id {route!r}")
        return found

    def _track(self, fut: Future) -> None:
        # finished futures drop themselves
        self._pending.append(fut)
        fut.add_done_callback(self._forget)

    def _forget(self, fut: Future) -> None:
        with self._lock:
            if fut in self._pending:
                self._pending.remove(fut)

    def _bump(self) -> int:
        # caller holds the lock
        self._generation += 1
        self._surface.clear_lines()
        return self._generation

    def _prepare(
          self
        , route: RouteDefinition
        , key: str
    ) -> Union[GeometryResult, CoordinateList]:
        """Coordinates to fetch, or the terminal UNAVAILABLE result."""
        try:
            coords = self._registry.coordinates_for_route(route)
        except InsufficientCoordinates as exc:
            _log.info("route %s: %s", route.vehicle_id, exc)
            return GeometryResult.unavailable(UnavailableReason.INSUFFICIENT_POINTS)
        if not key:
            return GeometryResult.unavailable(UnavailableReason.NO_KEY)
        return coords

    def _fetch(self, route: RouteDefinition, coords: CoordinateList, key: str) -> GeometryResult:
        try:
            result = GeometryResult.available(self._fetcher(coords, key))
        except GeometryFetchError as exc:
            _log.warning("route %s: geometry unavailable: %s", route.vehicle_id, exc)
            return GeometryResult.unavailable(UnavailableReason.FETCH_FAILED)
        except Exception:
            _log.exception("route %s: geometry fetcher raised", route.vehicle_id)
            return GeometryResult.unavailable(UnavailableReason.FETCH_FAILED)

        if len(result.polyline) < get_routing_defaults().min_points:
            _log.warning(
                "route %s: geometry has %d point(s); not drawing"
                , route.vehicle_id
                , len(result.polyline)
            )
            return GeometryResult.unavailable(UnavailableReason.FETCH_FAILED)
        return result

    def _is_current(self, gen: int, route: RouteDefinition) -> bool:
        if gen == self._generation:
            return True
        _log.debug(
            "route %s: discarding stale result (gen=%d, current=%d)"
            , route.vehicle_id
            , gen
            , self._generation
        )
        return False

    def _resolve_selected(
          self
        , gen: int
        , route: RouteDefinition
        , coords: CoordinateList
        , key: str
    ) -> GeometryResult:
        result = self._fetch(route, coords, key)
        with self._lock:
            if not self._is_current(gen, route):
                return result
            self._state = replace(self._state, result=result)
            if result.is_available:
                self._surface.draw_line(result.polyline, route_style(True), _route_data(route))
            _log.info("route %s: %s", route.vehicle_id, self._state.status_text)
        return result

    def _resolve_listed(
          self
        , gen: int
        , route: RouteDefinition
        , coords: CoordinateList
        , key: str
    ) -> GeometryResult:
        result = self._fetch(route, coords, key)
        with self._lock:
            if not self._is_current(gen, route):
                return result
            merged = dict(self._state.list_results)
            merged[route.vehicle_id] = result
            self._state = replace(self._state, list_results=MappingProxyType(merged))
            if result.is_available:
                self._surface.draw_line(result.polyline, route_style(False), _route_data(route))
        return result


def _route_data(route: RouteDefinition) -> Dict[str, Any]:
    return {
          "type": "route"
        , "vehicle_id": route.vehicle_id
        , "start": endpoint_label(route.start)
        , "end": endpoint_label(route.end)
        , "waypoints": len(route.waypoints)
    }
