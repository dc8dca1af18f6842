#!/usr/bin/env python3
# scripts/route_geometry.py
# -*- coding: utf-8 -*-

"""
Inspect fleet routes and fetch their road geometry from ORS.

Examples
--------
    # list routes (optionally filtered by vehicle id) and fleet totals
    python scripts/route_geometry.py --list --filter MH

    # select one route, fetch its geometry, write the drawn map as GeoJSON
    python scripts/route_geometry.py --vehicle DL03IJ5678 --geojson-out out/dl03.geojson

    # resolve every route of the list view
    python scripts/route_geometry.py --all --csv-out out/routes.csv

Key resolution: --api-key (optionally persisted with --save-key), then the
saved override, then FLEETMAP_ORS_API_KEY / ORS_API_KEY.
"""

from __future__ import annotations

# --- path bootstrap (must be the first lines of the file) ---
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]  # repo root (one level above /scripts)
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
# ------------------------------------------------------------

import argparse
import json
from typing import Optional

from fleetmap.app.key_store import ApiKeyStore
from fleetmap.app.selection import RouteSelectionController
from fleetmap.infra.logging import get_current_log_path, get_logger, init_logging, log_banner
from fleetmap.map.surface import InMemorySurface
from fleetmap.registry import Registry, cities_table, default_registry, routes_table

_log = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="List fleet routes and fetch road-following geometry from OpenRouteService."
    )

    mode = p.add_mutually_exclusive_group(required=True)
    mode.add_argument("--list", action="store_true", help="Print routes, cities and fleet totals.")
    mode.add_argument("--vehicle", help="Select one route by vehicle id and fetch its geometry.")
    mode.add_argument("--all", action="store_true", help="Fetch geometry for every (filtered) route.")

    p.add_argument("--filter", default="", help="Case-insensitive vehicle id filter.")
    p.add_argument("--registry-json", type=Path, default=None, help="Registry JSON (default: bundled data).")

    p.add_argument("--api-key", default=None, help="ORS API key for this run.")
    p.add_argument("--save-key", action="store_true", help="Persist --api-key as the local override.")
    p.add_argument("--base-url", default=None, help="ORS base URL (default: ORS_BASE_URL or public API).")

    p.add_argument("--geojson-out", type=Path, default=None, help="Write drawn features as GeoJSON.")
    p.add_argument("--csv-out", type=Path, default=None, help="Write the route table as CSV.")
    p.add_argument("--timeout", type=float, default=120.0, help="Per-request timeout and max seconds to wait for fetches.")

    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    p.add_argument("--write-log", action="store_true", help="Also write a per-run log under logs/.")
    return p


def _load_registry(path: Optional[Path]) -> Registry:
    return Registry.from_json(path) if path else default_registry()


def _make_fetcher(base_url: Optional[str], timeout_s: float):
    from fleetmap.road.geometry import fetch_route_geometry

    def _fetch(coords, key):
        return fetch_route_geometry(coords, key, base_url=base_url, timeout_s=timeout_s)

    return _fetch


def _write_outputs(args: argparse.Namespace, registry: Registry, surface: InMemorySurface) -> None:
    if args.geojson_out:
        args.geojson_out.parent.mkdir(parents=True, exist_ok=True)
        with open(args.geojson_out, "w", encoding="utf-8") as f:
            json.dump(surface.to_geojson(), f, ensure_ascii=False, indent=2)
        _log.info("GeoJSON → %s", args.geojson_out)
    if args.csv_out:
        args.csv_out.parent.mkdir(parents=True, exist_ok=True)
        routes_table(registry, args.filter).to_csv(args.csv_out, index=False)
        _log.info("CSV → %s", args.csv_out)


def _finish(ctl: RouteSelectionController, timeout: float) -> None:
    """Wait up to `timeout` s; past that, stop without joining the stuck fetch."""
    if not ctl.wait(timeout=timeout):
        _log.warning("geometry fetch still running after %.0f s; giving up", timeout)
        ctl.close(wait=False)


def main(argv: Optional[list] = None) -> int:
    args = _build_parser().parse_args(argv)
    init_logging(level=args.log_level, force=True, write_output=args.write_log)
    if get_current_log_path():
        _log.info("Log file → %s", get_current_log_path())

    registry = _load_registry(args.registry_json)

    if args.list:
        log_banner(_log, "Fleet overview")
        print(json.dumps(registry.fleet_overview(), indent=2))
        print(routes_table(registry, args.filter).to_string(index=False))
        print()
        print(cities_table(registry).to_string(index=False))
        _write_outputs(args, registry, InMemorySurface())
        return 0

    keys = ApiKeyStore.from_env()
    surface = InMemorySurface()

    with RouteSelectionController(
          registry
        , surface
        , fetcher=_make_fetcher(args.base_url, args.timeout)
        , key_store=keys
    ) as ctl:
        ctl.load_city_pins()
        if args.api_key:
            ctl.set_api_key(args.api_key, persist=args.save_key)
        _log.info("API key source: %s", ctl.key_source)

        if args.vehicle:
            try:
                ctl.select(args.vehicle)
            except KeyError as exc:
                _log.error("%s", exc)
                return 2
            _finish(ctl, args.timeout)
            state = ctl.state
            log_banner(_log, f"Route {args.vehicle}")
            print(json.dumps(
                {
                      "vehicle_id": args.vehicle
                    , "status": state.status.value
                    , "status_text": state.status_text
                    , "points": len(state.result.polyline)
                }
                , indent=2
            ))
            code = 0 if state.result.is_available else 1
        else:
            ctl.load_routes(registry.filter_routes(args.filter))
            _finish(ctl, args.timeout)
            results = ctl.state.list_results
            log_banner(_log, f"{len(results)} route(s)")
            for vid, res in results.items():
                detail = res.reason.value if res.reason else f"{len(res.polyline)} points"
                print(f"{vid:<12} {res.state.value:<12} {detail}")
            code = 0

    _write_outputs(args, registry, surface)
    return code


if __name__ == "__main__":
    sys.exit(main())
