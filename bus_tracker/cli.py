"""Command-line front-end.

Runs the resolution pipeline once and prints the resulting state. Fatal
initialization errors (missing or corrupt geo database) are reported on
stderr with exit status 1.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import AppConfig, get_config
from .container import Container
from .domain.errors import (
    BusTrackerError,
    GeoDatabaseCorruptError,
    GeoDatabaseNotFoundError,
)
from .domain.models import ResolutionState
from .observability import configure_logging
from .services import ResolutionService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bus-tracker",
        description="Find transit stops near this machine's public IP location.",
    )
    parser.add_argument(
        "--db",
        type=Path,
        help="Path to a MaxMind City .mmdb database (overrides BT_GEO_DATABASE_PATH)",
    )
    parser.add_argument(
        "--count",
        type=int,
        help="Number of stops to request (overrides BT_TRANSIT_MAX_RESULTS)",
    )
    parser.add_argument(
        "--destination",
        default="",
        help="Free-form destination to store in the state",
    )
    parser.add_argument(
        "--no-stops",
        action="store_true",
        help="Skip the stop lookup",
    )
    return parser


def _apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    update = {}
    if args.db is not None:
        update["geo"] = config.geo.model_copy(update={"database_path": args.db})
    if args.count is not None:
        update["transit"] = config.transit.model_copy(update={"max_results": args.count})
    if args.no_stops:
        update["find_stops_on_start"] = False
    return config.model_copy(update=update) if update else config


def format_state(state: ResolutionState) -> str:
    """Render the state as plain text."""
    lines = [
        f"Address:     {state.address}",
        f"Place:       {state.place or '(unknown)'}",
        f"Position:    {state.position.latitude}, {state.position.longitude}",
    ]
    if state.destination:
        lines.append(f"Destination: {state.destination}")
    lines.append(f"Stops:       {len(state.stops)}")
    lines.extend(f"  {stop}" for stop in state.stops)
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = _apply_overrides(get_config(), args)
        configure_logging(config.observability)
    except BusTrackerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    container = Container.create_default(config)
    try:
        service: ResolutionService = container.resolve(ResolutionService)
        state = service.initialize()
        if args.destination:
            state = service.set_destination(args.destination)
        print(format_state(state))
        if service.diagnostics:
            names = ", ".join(sorted(d.name for d in service.diagnostics))
            print(f"Degraded:    {names}")
    except GeoDatabaseNotFoundError as e:
        print(f"Geo database not found: {e.database_path}", file=sys.stderr)
        return 1
    except GeoDatabaseCorruptError as e:
        print(f"Geo database is corrupt: {e}", file=sys.stderr)
        return 1
    except BusTrackerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        container.close()
    return 0
