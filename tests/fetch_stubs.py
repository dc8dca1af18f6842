# tests/fetch_stubs.py
from __future__ import annotations

import threading
import time
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from fleetmap.road.ors_common import GeometryFetchError

LngLat = Tuple[float, float]


class StubFetcher:
    """
    Records calls; answers from a per-call policy.

    `polylines` maps the first input coordinate to the polyline to return;
    `delays` maps it to a sleep before answering; `fail` makes every call raise.
    """

    def __init__(
        self,
        polylines: Optional[Dict[LngLat, List[LngLat]]] = None,
        *,
        delays: Optional[Dict[LngLat, float]] = None,
        fail: bool = False,
        default: Optional[Callable[[Sequence[LngLat]], List[LngLat]]] = None,
    ) -> None:
        self.polylines = polylines or {}
        self.delays = delays or {}
        self.fail = fail
        self.default = default
        self.calls: List[Tuple[List[LngLat], str]] = []
        self._lock = threading.Lock()

    def __call__(self, coords, api_key):
        with self._lock:
            self.calls.append((list(coords), api_key))
        first = tuple(coords[0])
        time.sleep(self.delays.get(first, 0.0))
        if self.fail:
            raise GeometryFetchError("stub failure")
        if first in self.polylines:
            return list(self.polylines[first])
        if self.default is not None:
            return self.default(coords)
        # echo the input as a "road" line
        return [tuple(c) for c in coords]
