from __future__ import annotations

from .geometry import fetch_route_geometry
from .ors_client import ORSClient
from .ors_common import (
      GeometryFetchError
    , MissingApiKey
    , NoGeometry
    , NoRoute
    , ORSConfig
    , RateLimited
)

__all__ = [
      "fetch_route_geometry", "ORSClient", "ORSConfig"
    , "GeometryFetchError", "MissingApiKey", "NoGeometry", "NoRoute", "RateLimited"
]
