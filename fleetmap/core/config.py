# fleetmap/core/config.py
# -*- coding: utf-8 -*-

"""
Core configuration models and globals.

Pure configuration structures, independent of HTTP or map infrastructure.
Safe to import from anywhere.

Current contents
----------------
- MapDefaults: initial view and selection zoom
- RoutingDefaults: directions profile and geometry rules
"""

from __future__ import annotations

from dataclasses import dataclass


# ────────────────────────────────────────────────────────────────────────────────
# Map view defaults
# ────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class MapDefaults:
    """
    Initial map view.

    Attributes
    ----------
    center_lat, center_lng : float
        Default centre (geographic centre of India).
    zoom : int
        Zoom used for the overview and after deselection.
    selected_zoom : int
        Zoom used when centring on a selected route.
    """

    center_lat: float = 20.5937
    center_lng: float = 78.9629
    zoom: int = 5
    selected_zoom: int = 8


# ────────────────────────────────────────────────────────────────────────────────
# Routing defaults
# ────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RoutingDefaults:
    """
    Directions-related defaults.

    Attributes
    ----------
    profile : str
        ORS routing profile used for route geometry.
    min_points : int
        Minimum number of coordinates for a routable request and for a
        drawable polyline.
    bulk_workers : int
        Thread pool size for geometry fetches.
    """

    profile: str = "driving-car"
    min_points: int = 2
    bulk_workers: int = 4


MAP_DEFAULTS = MapDefaults()
ROUTING_DEFAULTS = RoutingDefaults()


def get_map_defaults() -> MapDefaults:
    """Return the global map view defaults."""
    return MAP_DEFAULTS


def get_routing_defaults() -> RoutingDefaults:
    return ROUTING_DEFAULTS
