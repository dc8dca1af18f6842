# fleetmap/app/key_store.py
# -*- coding: utf-8 -*-
"""
ORS API key storage.

Two sources, in precedence order:
  1) a user-supplied override, persisted as JSON in a local file
  2) the configured key (FLEETMAP_ORS_API_KEY, then ORS_API_KEY)

Storage failures are logged and never raised: a missing or unreadable file
just means "no override".
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from fleetmap.core.types import StrPath
from fleetmap.infra.logging import get_logger

_log = get_logger(__name__)

DEFAULT_KEY_FILE = Path("~/.fleetmap/ors_key.json")


def configured_key_from_env() -> str:
    return (os.getenv("FLEETMAP_ORS_API_KEY") or os.getenv("ORS_API_KEY") or "").strip()


class ApiKeyStore:
    """
    Resolves the key used for geometry fetches.

    Parameters
    ----------
    configured_key : str
        Build/deploy-time key. Empty string means none.
    override_path : path | None
        JSON file holding the user override. None keeps overrides in memory.
    """

    def __init__(
          self
        , configured_key: str = ""
        , override_path: Optional[StrPath] = None
    ) -> None:
        self.configured_key = (configured_key or "").strip()
        self.override_path = Path(override_path).expanduser() if override_path else None
        self._override = self._load()

    @classmethod
    def from_env(cls) -> "ApiKeyStore":
        path = os.getenv("FLEETMAP_KEY_FILE") or DEFAULT_KEY_FILE
        return cls(configured_key=configured_key_from_env(), override_path=path)

    # ── reads ──────────────────────────────────────────────────────────────────
    def current(self) -> str:
        """Override if set, else the configured key, else ''."""
        return self._override or self.configured_key

    @property
    def source(self) -> str:
        if self._override:
            return "override"
        if self.configured_key:
            return "configured"
        return "none"

    # ── writes ─────────────────────────────────────────────────────────────────
    def save(self, key: str, *, persist: bool = True) -> None:
        """Set the override (empty clears it) and persist it when a file is configured."""
        self._override = (key or "").strip()
        if persist and self.override_path is not None:
            self._write()

    def clear(self) -> None:
        self.save("")

    # ── file I/O ───────────────────────────────────────────────────────────────
    def _load(self) -> str:
        if self.override_path is None or not self.override_path.exists():
            return ""
        try:
            with open(self.override_path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as exc:
            _log.warning("key store: cannot read %s (%s); ignoring", self.override_path, exc)
            return ""
        key = raw.get("ors_api_key") if isinstance(raw, dict) else None
        return str(key or "").strip()

    def _write(self) -> None:
        try:
            self.override_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.override_path, "w", encoding="utf-8") as f:
                json.dump({"ors_api_key": self._override}, f)
            _log.info("key store: override saved to %s", self.override_path)
        except OSError as exc:
            _log.warning("key store: cannot write %s (%s); keeping key in memory", self.override_path, exc)
