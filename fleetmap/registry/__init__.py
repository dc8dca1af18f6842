from __future__ import annotations

from .registry import InsufficientCoordinates, Registry, default_registry
from .tables import cities_table, delivery_tier, routes_table

__all__ = [
      "InsufficientCoordinates", "Registry", "default_registry"
    , "cities_table", "delivery_tier", "routes_table"
]
