# fleetmap/road/ors_mixins.py
# -*- coding: utf-8 -*-
"""
Routing mixin for the ORS HTTP client.

Expectations for the concrete client class that inherits it:
- Attributes:
    self.cfg                      : ORSConfig (see fleetmap.road.ors_common)
- Methods:
    self._post(path, json=None)   -> dict

Notes
-----
• Logs inputs (shortened) and outputs (summaries).
• Raises domain exceptions from ors_common; callers decide how to degrade.
"""

from __future__ import annotations

from typing import Any as _Any, Dict as _Dict, List as _List, Sequence as _Sequence

from fleetmap.core.types import JSONDict, LngLat
from fleetmap.infra.logging import get_logger
from .ors_common import _short, NoGeometry

_log = get_logger(__name__)


def extract_polyline(data: _Any) -> _List[LngLat]:
    """
    Pull `features[0].geometry.coordinates` out of an ORS GeoJSON response.

    Raises
    ------
    NoGeometry
        If the payload is not a FeatureCollection-like dict or the first
        feature carries no list of [lng, lat] pairs.
    """
    if not isinstance(data, dict):
        raise NoGeometry(f"directions response is {type(data).__name__}, expected object")

    feats = data.get("features") or []
    if not isinstance(feats, list) or not feats:
        raise NoGeometry("directions response has no features")

    geom = (feats[0] or {}).get("geometry") if isinstance(feats[0], dict) else None
    coords = (geom or {}).get("coordinates") if isinstance(geom, dict) else None
    if not isinstance(coords, list):
        raise NoGeometry("first feature has no geometry.coordinates")

    line: _List[LngLat] = []
    for pt in coords:
        try:
            line.append((float(pt[0]), float(pt[1])))
        except (TypeError, ValueError, IndexError) as exc:
            raise NoGeometry(f"bad coordinate {pt!r} in geometry") from exc
    return line


class RoutingMixin:
    """
    Directions helpers.

    Requires concrete client to provide:
      - self._post(...)
      - self.cfg.default_profile
    """

    def route(self, profile: str, coords: _Sequence[LngLat], **kwargs) -> JSONDict:
        """
        Low-level GeoJSON directions call.

        Parameters
        ----------
        profile : str
            'driving-car', 'driving-hgv', etc.
        coords : sequence of (lng, lat)
        kwargs : dict
            Extra ORS body parameters (e.g. instructions=False).

        Returns
        -------
        dict : raw ORS GeoJSON response
        """
        body: _Dict[str, _Any] = {
              "coordinates": [[float(lng), float(lat)] for lng, lat in coords]
            , **kwargs
        }
        _log.info("ROUTE raw %s n=%d coords=%s", profile, len(body["coordinates"]), _short(body["coordinates"]))
        data = self._post(f"/v2/directions/{profile}/geojson", json=body)
        _log.debug("ROUTE raw ok keys=%s", list(data.keys()) if isinstance(data, dict) else type(data).__name__)
        return data

    def route_geometry(
        self,
        coords: _Sequence[LngLat],
        profile: str | None = None,
    ) -> _List[LngLat]:
        """
        Road-following polyline through `coords`, in the given order.

        Turn-by-turn instructions are disabled; only geometry is requested.
        The caller guarantees at least two coordinates.

        Returns
        -------
        list[(lng, lat)]
        """
        prof = (profile or self.cfg.default_profile)
        data = self.route(prof, coords, instructions=False)
        line = extract_polyline(data)
        _log.info("ROUTE geometry ok %s in=%d out=%d points", prof, len(coords), len(line))
        return line
