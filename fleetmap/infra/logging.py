# fleetmap/infra/logging.py
# -*- coding: utf-8 -*-

"""
Logging setup for fleetmap.

Library modules only ask for loggers; the CLI (or a test that wants output)
calls `init_logging()` once.

Usage
-----
    from fleetmap.infra.logging import init_logging, get_logger

    init_logging("DEBUG", write_output=True)
    _log = get_logger(__name__)
    _log.info("route %s selected", vehicle_id)

Line format
-----------
    [2025-11-17 17:47:09][INFO][route-geometry_0][fleetmap.app.selection] ...

Geometry fetches complete on pool workers (threads named route-geometry_N).

Environment
-----------
- FLEETMAP_LOG_LEVEL overrides the `level` argument.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

# ────────────────────────────────────────────────────────────────────────────────
# Module state
# ────────────────────────────────────────────────────────────────────────────────

_LOG_FORMAT = "[{asctime}][{levelname}][{threadName}][{name}] {message}"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_RUN_LOGS_DIR = Path("logs")

_run_log: Optional[Path] = None


def get_current_log_path() -> Optional[Path]:
    """Per-run log file chosen by the last `init_logging()`, or None (stdout only)."""
    return _run_log


# ────────────────────────────────────────────────────────────────────────────────
# Setup
# ────────────────────────────────────────────────────────────────────────────────

def _level_from(level: str) -> int:
    name = os.getenv("FLEETMAP_LOG_LEVEL") or level
    return getattr(logging, str(name).upper(), logging.INFO)


def _run_log_path(logs_dir: Optional[Path]) -> Path:
    # <logs_dir>/<script stem>__<YYYYmmdd-HHMMSS>.log
    stem = Path(sys.argv[0] or "fleetmap").stem
    if not stem or stem == "-m":
        stem = "fleetmap"
    folder = Path(logs_dir) if logs_dir is not None else _RUN_LOGS_DIR
    return folder / f"{stem}__{datetime.now():%Y%m%d-%H%M%S}.log"


def init_logging(
      level: str = "INFO"
    , *
    , force: bool = True
    , write_output: bool = False
    , log_file: Optional[Path] = None
    , logs_dir: Optional[Path] = None
    , quiet: Iterable[str] = ("urllib3",)
) -> None:
    """
    Configure the root logger: stdout always, a file on request.

    Parameters
    ----------
    level : str
        Level name; FLEETMAP_LOG_LEVEL wins when set.
    force : bool
        Drop handlers already installed on the root logger.
    write_output : bool
        Add a per-run file under `logs_dir` (default `logs/`).
    log_file : Path | None
        Explicit file; implies file output.
    logs_dir : Path | None
        Folder for the per-run file.
    quiet : iterable of str
        Chatty third-party loggers capped at WARNING.
    """
    global _run_log

    root = logging.getLogger()
    if force:
        for h in list(root.handlers):
            root.removeHandler(h)
    root.setLevel(_level_from(level))

    fmt = logging.Formatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT, style="{")
    handlers = [logging.StreamHandler(stream=sys.stdout)]

    _run_log = None
    if log_file is not None or write_output:
        target = Path(log_file) if log_file is not None else _run_log_path(logs_dir)
        target.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(target, encoding="utf-8"))
        _run_log = target.resolve()

    for h in handlers:
        h.setFormatter(fmt)
        root.addHandler(h)

    for name in quiet:
        noisy = logging.getLogger(name)
        if noisy.level < logging.WARNING:
            noisy.setLevel(logging.WARNING)

    get_logger(__name__).debug(
        "logging ready level=%s file=%s"
        , logging.getLevelName(root.level)
        , _run_log or "-"
    )


# ────────────────────────────────────────────────────────────────────────────────
# Helpers
# ────────────────────────────────────────────────────────────────────────────────

def log_banner(
      log: logging.Logger
    , msg: str
    , *
    , char: str = "="
    , width: int = 60
) -> None:
    """Emit `msg` between two rules of `char`."""
    rule = char * width
    for line in (rule, msg, rule):
        log.info(line)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "fleetmap")
