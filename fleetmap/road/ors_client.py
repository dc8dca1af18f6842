# fleetmap/road/ors_client.py
# -*- coding: utf-8 -*-
"""
Concrete ORS HTTP client:
- Composes RoutingMixin
- Centralizes HTTP (session, retry adapter, headers)
- Logs one line per request (status, latency) and the error body on failure

Notes
-----
• Infra knobs live in ORSConfig (timeout, retries, UA).
• The mixin calls _post which lands in _request:
    - request (timeout = cfg.timeout_s, None means transport default)
    - JSON decode + error mapping (429→RateLimited, 404/422→NoRoute,
      other non-2xx→requests.HTTPError)
• No caching and no client-side rate limiting: every call hits the service.
"""

from __future__ import annotations

import time as _time
from typing import Any as _Any, Dict as _Dict, Optional as _Optional

import requests as _req
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from fleetmap.infra.logging import get_logger
from .ors_common import (
      _extract_error_text
    , ORSConfig
    , NoRoute
    , RateLimited
)
from .ors_mixins import RoutingMixin

_log = get_logger(__name__)


class ORSClient(RoutingMixin):
    """
    ORS client bound to one API key.

    `session` may be injected (tests, shared pools); otherwise a private
    requests.Session with a Retry adapter is created and owned by the client.
    """

    def __init__(
        self,
        cfg: ORSConfig | None = None,
        *,
        session: _req.Session | None = None,
    ):
        self.cfg = cfg or ORSConfig()
        self.base_url = self.cfg.base_url

        self._owns_session = session is None
        if session is None:
            session = _req.Session()
            retries = Retry(
                  total=self.cfg.max_retries
                , connect=self.cfg.max_retries
                , read=self.cfg.max_retries
                , backoff_factor=self.cfg.backoff_s
                , status_forcelist=(500, 502, 503, 504)
                , allowed_methods=frozenset(["GET", "POST"])
                , raise_on_status=False
            )
            adapter = HTTPAdapter(max_retries=retries)
            session.mount("https://", adapter)
            session.mount("http://", adapter)
        self._sess = session
        self._headers = {
              "Authorization": self.cfg.api_key
            , "User-Agent": self.cfg.user_agent
            , "Accept": "application/json, application/geo+json"
        }

        _log.debug(
            "ORSClient ready base=%s timeout=%s retries=%s",
              self.base_url
            , self.cfg.timeout_s
            , self.cfg.max_retries
        )

    # ────────────────────────────────────────────────────────────────────────
    # Lifecycle helpers
    # ────────────────────────────────────────────────────────────────────────
    @classmethod
    def from_env(cls) -> "ORSClient":
        """Convenience ctor that pulls ORS_API_KEY / ORS_BASE_URL from env."""
        return cls(cfg=ORSConfig())

    def close(self) -> None:
        """Close the underlying HTTP session if this client created it."""
        if self._owns_session:
            self._sess.close()

    def __enter__(self) -> "ORSClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ────────────────────────────────────────────────────────────────────────
    # Core HTTP layer (used by RoutingMixin)
    # ────────────────────────────────────────────────────────────────────────
    def _request(
        self,
        method: str,
        path: str,
        *,
        json: _Optional[_Dict[str, _Any]] = None,
    ) -> _Dict[str, _Any]:
        """
        Send one request, map the status to a domain error, parse JSON.

        Raises
        ------
        RateLimited      on 429
        NoRoute          on 404 / 422
        requests.HTTPError for any other non-2xx
        requests.RequestException on transport failures
        ValueError       on an undecodable body
        """
        method_u = method.upper()
        url = f"{self.base_url}{path}"

        t0 = _time.time()
        try:
            resp = self._sess.request(
                  method_u
                , url
                , json=json
                , headers=self._headers
                , timeout=self.cfg.timeout_s
            )
        except _req.RequestException as e:
            dt_ms = (_time.time() - t0) * 1000.0
            _log.error(
                "HTTP %s %s — request exception %s after %.0f ms",
                  method_u
                , path
                , type(e).__name__
                , dt_ms
            )
            raise

        dt_ms = (_time.time() - t0) * 1000.0

        if resp.status_code == 429:
            _log.warning("HTTP 429 %s (%.0f ms) — rate limited", path, dt_ms)
            raise RateLimited(f"429 from {path}")

        if 200 <= resp.status_code < 300:
            try:
                data = resp.json()
            except ValueError:
                txt = (resp.text or "")[:200]
                _log.error(
                    "HTTP %s %s — invalid JSON (%.0f ms): %s",
                      method_u
                    , path
                    , dt_ms
                    , txt
                )
                raise

            _log.info(
                "HTTP %s %s — %s (%.0f ms)",
                  method_u
                , path
                , resp.status_code
                , dt_ms
            )
            return data

        if resp.status_code in (404, 422):
            msg = _extract_error_text(resp)
            _log.warning(
                "HTTP %s %s — %s (%.0f ms) no-route: %s",
                  method_u
                , path
                , resp.status_code
                , dt_ms
                , msg
            )
            raise NoRoute(f"No route for {path}: {msg}")

        msg = _extract_error_text(resp)
        _log.error(
            "HTTP %s %s — %s (%.0f ms) body=%s",
              method_u
            , path
            , resp.status_code
            , dt_ms
            , msg
        )
        resp.raise_for_status()
        # 1xx/3xx that were not followed
        raise _req.HTTPError(f"unexpected status {resp.status_code} from {path}", response=resp)

    def _post(
        self,
        path: str,
        json: _Optional[_Dict[str, _Any]] = None,
    ) -> _Dict[str, _Any]:
        return self._request("POST", path, json=json)


__all__ = ["ORSClient", "ORSConfig"]
