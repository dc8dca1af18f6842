# fleetmap/core/models.py
# -*- coding: utf-8 -*-

"""
Core domain models (pure dataclasses).

    - GeoPoint: a raw geographic coordinate
    - Location: a named city pin with a delivery count
    - RouteDefinition: one vehicle's route (start, end, ordered waypoints)

This module has no HTTP, map or registry imports and is safe to import from
anywhere. All models are frozen: registry data is reference data and is
never mutated after load.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple, Union

from fleetmap.core.types import LngLat


# ────────────────────────────────────────────────────────────────────────────────
# Raw coordinate
# ────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GeoPoint:
    """
    A raw coordinate in decimal degrees.

    Attributes
    ----------
    lat : float
        Latitude.
    lng : float
        Longitude.
    """

    lat: float
    lng: float

    @property
    def lng_lat(self) -> LngLat:
        return (float(self.lng), float(self.lat))

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "GeoPoint":
        return cls(lat=float(raw["lat"]), lng=float(raw["lng"]))


# ────────────────────────────────────────────────────────────────────────────────
# City pin
# ────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Location:
    """
    A named location shown as a pin on the map.

    Attributes
    ----------
    name : str
        Unique name inside a registry (e.g. "Pune").
    lat, lng : float
        Coordinates in decimal degrees.
    delivery_count : int
        Number of deliveries for the city (>= 0).
    """

    name: str
    lat: float
    lng: float
    delivery_count: int = 0

    def __post_init__(self) -> None:
        if self.delivery_count < 0:
            raise ValueError(f"delivery_count must be >= 0 for {self.name!r}")

    @property
    def lng_lat(self) -> LngLat:
        return (float(self.lng), float(self.lat))


# ────────────────────────────────────────────────────────────────────────────────
# Route
# ────────────────────────────────────────────────────────────────────────────────

Endpoint = Union[str, GeoPoint]
"""A Location name (resolved through the registry) or a raw coordinate."""


@dataclass(frozen=True)
class RouteDefinition:
    """
    A vehicle's route.

    Attributes
    ----------
    vehicle_id : str
        Natural key used for selection and display (e.g. "MH12AB1234").
    start, end : str | GeoPoint
        Location names or raw coordinates.
    waypoints : tuple[GeoPoint, ...]
        Intermediate points, visited in order.
    """

    vehicle_id: str
    start: Endpoint
    end: Endpoint
    waypoints: Tuple[GeoPoint, ...] = field(default_factory=tuple)

    @property
    def label(self) -> str:
        return f"{endpoint_label(self.start)} → {endpoint_label(self.end)}"


def endpoint_label(ep: Endpoint) -> str:
    if isinstance(ep, GeoPoint):
        return f"{ep.lat:.4f},{ep.lng:.4f}"
    return str(ep)
