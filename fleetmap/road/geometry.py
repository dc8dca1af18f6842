# fleetmap/road/geometry.py
# -*- coding: utf-8 -*-
"""
Route geometry fetcher.

`fetch_route_geometry(coordinates, api_key)` is the function the selection
controller calls: one directions request per call, no retries, no cache, and
a single failure type (GeometryFetchError) whatever went wrong.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import requests

from fleetmap.core.types import LngLat
from fleetmap.infra.logging import get_logger
from .ors_client import ORSClient
from .ors_common import (
      GeometryFetchError
    , MissingApiKey
    , NoGeometry
    , NoRoute
    , ORSConfig
    , RateLimited
)

_log = get_logger(__name__)

__all__ = ["fetch_route_geometry", "GeometryFetchError"]


def fetch_route_geometry(
      coordinates: Sequence[LngLat]
    , api_key: str
    , *
    , base_url: Optional[str] = None
    , session: Optional[requests.Session] = None
    , timeout_s: Optional[float] = None
) -> List[LngLat]:
    """
    Fetch the driving geometry through `coordinates` (>= 2 (lng, lat) pairs).

    Parameters
    ----------
    coordinates : sequence of (lng, lat)
        Start, waypoints and end, in visiting order.
    api_key : str
        ORS key, sent as the Authorization header.
    base_url : str | None
        Override for the ORS endpoint (defaults to ORS_BASE_URL / public API).
    session : requests.Session | None
        Optional shared/injected session; a private one is used otherwise.
    timeout_s : float | None
        Request timeout. None keeps the transport default.

    Returns
    -------
    list[(lng, lat)]
        Road-following polyline from the first to the last coordinate.

    Raises
    ------
    MissingApiKey
        Empty `api_key`. ORS_API_KEY is not consulted here.
    GeometryFetchError
        Non-2xx status (429 included), network failure, undecodable body or
        a response without features[0].geometry.coordinates.
    """
    if not (api_key or "").strip():
        raise MissingApiKey("route geometry fetch needs a non-empty api_key")

    cfg = ORSConfig(api_key=api_key, base_url=base_url, timeout_s=timeout_s)
    client = ORSClient(cfg=cfg, session=session)
    try:
        return client.route_geometry(coordinates)
    except (RateLimited, NoRoute, NoGeometry, requests.RequestException, ValueError) as exc:
        _log.warning(
            "geometry fetch failed n=%d: %s: %s"
            , len(coordinates)
            , type(exc).__name__
            , exc
        )
        raise GeometryFetchError(f"route geometry fetch failed: {exc}") from exc
    finally:
        client.close()
