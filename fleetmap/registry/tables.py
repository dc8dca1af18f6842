# fleetmap/registry/tables.py
# -*- coding: utf-8 -*-
"""
Tabular views of the registry (pandas), used by the CLI listing and CSV export.
"""

from __future__ import annotations

import pandas as pd

from fleetmap.core.models import endpoint_label
from fleetmap.registry.registry import InsufficientCoordinates, Registry

_TIER_COLUMNS = ["name", "lat", "lng", "deliveries", "tier"]
_ROUTE_COLUMNS = ["vehicle_id", "start", "end", "waypoints", "n_points", "routable"]


def delivery_tier(deliveries: int) -> str:
    """'high' (>= 15), 'medium' (>= 10) or 'low'."""
    if deliveries >= 15:
        return "high"
    if deliveries >= 10:
        return "medium"
    return "low"


def cities_table(registry: Registry) -> pd.DataFrame:
    """One row per city pin, with its delivery tier."""
    rows = [
        {
              "name": loc.name
            , "lat": loc.lat
            , "lng": loc.lng
            , "deliveries": loc.delivery_count
            , "tier": delivery_tier(loc.delivery_count)
        }
        for loc in registry.locations
    ]
    return pd.DataFrame(rows, columns=_TIER_COLUMNS)


def routes_table(registry: Registry, query: str = "") -> pd.DataFrame:
    """
    One row per route (optionally filtered by vehicle id).

    `n_points` is the resolved coordinate count (0 when the route is not
    routable), `routable` whether a directions request would be sent.
    """
    rows = []
    for route in registry.filter_routes(query):
        try:
            n_points = len(registry.coordinates_for_route(route))
            routable = True
        except InsufficientCoordinates:
            n_points = 0
            routable = False
        rows.append(
            {
                  "vehicle_id": route.vehicle_id
                , "start": endpoint_label(route.start)
                , "end": endpoint_label(route.end)
                , "waypoints": len(route.waypoints)
                , "n_points": n_points
                , "routable": routable
            }
        )
    return pd.DataFrame(rows, columns=_ROUTE_COLUMNS)
