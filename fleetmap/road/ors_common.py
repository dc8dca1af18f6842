# fleetmap/road/ors_common.py
# -*- coding: utf-8 -*-
"""
Common pieces for the ORS client stack:
- Error classes
- Helpers for log previews and response error extraction
- ORSConfig (base URL, API key, profile, timeout, retries)

This module does not perform HTTP calls; the HTTP logic lives in
fleetmap/road/ors_client.py. No logging configuration happens here; entry
points call init_logging().
"""

from __future__ import annotations

import json
import os
from typing import Any, Optional

from fleetmap.core.config import get_routing_defaults
from fleetmap.infra.logging import get_logger

# ────────────────────────────────────────────────────────────────────────────────
# Errors
# ────────────────────────────────────────────────────────────────────────────────

class MissingApiKey(RuntimeError):
    """Raised when an ORS client is built without an API key."""
    ...

class RateLimited(Exception):
    """Raised when ORS answers 429."""
    ...

class NoRoute(Exception):
    """Raised when ORS reports that no route could be found (404/422)."""
    ...

class NoGeometry(ValueError):
    """Raised when a directions response has no usable line geometry."""
    ...

class GeometryFetchError(Exception):
    """
    Single failure outcome of a route geometry fetch.

    Wraps every transport/remote cause (HTTP status, network error, bad JSON,
    missing geometry); the underlying exception is chained as __cause__.
    """
    ...


# ────────────────────────────────────────────────────────────────────────────────
# Logging
# ────────────────────────────────────────────────────────────────────────────────

_log = get_logger(__name__)

def _short(v: Any, maxlen: int = 420) -> str:
    """
    Safe, concise preview of a Python object for logs.
    """
    try:
        s = json.dumps(v, ensure_ascii=False, sort_keys=True)
    except (TypeError, ValueError):
        s = str(v)
    return s if len(s) <= maxlen else (s[:maxlen] + " …")


# ────────────────────────────────────────────────────────────────────────────────
# Small utils
# ────────────────────────────────────────────────────────────────────────────────

def _extract_error_text(resp) -> str:
    """
    Best-effort extraction of a human-friendly error from a HTTP response.
    """
    try:
        j = resp.json()
    except ValueError:
        return (getattr(resp, "text", "") or "")[:500] or "<no-text>"
    if isinstance(j, dict):
        return _short(j)
    return str(j)


def _mask_key(key: str) -> str:
    if not key:
        return "<none>"
    if len(key) <= 8:
        return "***"
    return f"{key[:4]}…{key[-4:]}"


# ────────────────────────────────────────────────────────────────────────────────
# Config
# ────────────────────────────────────────────────────────────────────────────────

class ORSConfig:
    """
    Configuration bundle for the ORS client.

    Parameters
    ----------
    api_key : str | None
        If None, reads from env ORS_API_KEY.
    base_url : str | None
        ORS base URL (no trailing slash). If None, env ORS_BASE_URL or the
        public endpoint.
    default_profile : str
        ORS routing profile (e.g. 'driving-car').
    timeout_s : float | None
        Per-request timeout. None leaves the transport default in place.
    max_retries : int
        HTTP retries for transient 5xx. Geometry fetches use 0.
    backoff_s : float
        Base backoff for the retry adapter.
    user_agent : str
        Sent as User-Agent.
    """
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        default_profile: str | None = None,
        timeout_s: Optional[float] = None,
        max_retries: int = 0,
        backoff_s: float = 0.3,
        user_agent: str = "fleetmap-ORSClient/1.0",
    ) -> None:
        self.api_key = (api_key or os.getenv("ORS_API_KEY", "")).strip()
        self.base_url = (
            base_url or os.getenv("ORS_BASE_URL") or "https://api.openrouteservice.org"
        ).rstrip("/")
        self.default_profile = str(default_profile or get_routing_defaults().profile)
        self.timeout_s = float(timeout_s) if timeout_s is not None else None
        self.max_retries = int(max_retries)
        self.backoff_s = float(backoff_s)
        self.user_agent = str(user_agent)

        if not self.api_key:
            _log.error("ORSConfig init: ORS API key not set")
            raise MissingApiKey(
                "ORS API key not set. Export ORS_API_KEY or pass api_key= to ORSConfig()."
            )

        _log.debug(
            "ORSConfig init: base_url=%s profile=%s timeout=%s retries=%s key=%s ua=%s",
            self.base_url,
            self.default_profile,
            self.timeout_s,
            self.max_retries,
            _mask_key(self.api_key),
            self.user_agent,
        )
