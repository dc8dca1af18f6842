# fleetmap/core/types.py
# -*- coding: utf-8 -*-

"""
Shared type aliases.

Kept import-free (no project imports) so every layer can use them without
circular dependencies.

Contents
--------
- LngLat / Polyline / CoordinateList: coordinates in (lng, lat) order, the
  order used by GeoJSON and by the ORS directions API
- XY: projected map coordinates (Web Mercator metres)
- JSON* aliases for raw API payloads
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Sequence, Tuple, Union


# ────────────────────────────────────────────────────────────────────────────────
# Path-like
# ────────────────────────────────────────────────────────────────────────────────

StrPath = Union[str, Path]


# ────────────────────────────────────────────────────────────────────────────────
# JSON-like structures
# ────────────────────────────────────────────────────────────────────────────────

JSONScalar = Union[str, int, float, bool, None]
JSONValue = Union["JSONScalar", "JSONList", "JSONDict"]
JSONList = List[JSONValue]
JSONDict = Dict[str, JSONValue]


# ────────────────────────────────────────────────────────────────────────────────
# Geographic helpers
# ────────────────────────────────────────────────────────────────────────────────

LngLat = Tuple[float, float]
"""A (lng, lat) pair in decimal degrees."""

CoordinateList = List[LngLat]
"""Ordered routing input: start → waypoints → end."""

Polyline = Sequence[LngLat]
"""Road-following geometry as returned by the directions service."""

XY = Tuple[float, float]
"""Projected (x, y) in EPSG:3857 metres."""
