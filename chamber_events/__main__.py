"""Command-line entry for chamber_events.

Reads CMS event records from a JSON file and prints either the classified
events-page listing or the newsletter digest as JSON.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any, NoReturn, Optional

from .core.config_manager import EngineConfig
from .core.timezone_utils import now_local, parse_datetime, to_calendar_datetime
from .domain.listing import build_event_listing
from .domain.newsletter_digest import build_newsletter_digest
from .exceptions import ChamberEventsError, EventInputError
from .logging_config import configure_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_BAD_INPUT = 2


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {number}")
    return number


def _iso_datetime(value: str) -> datetime:
    try:
        return parse_datetime(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an ISO-8601 date-time, got {value!r}") from None


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the chamber_events CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="chamber_events",
        description="Chamber events - recurring event occurrence engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m chamber_events listing --events events.json
  python -m chamber_events digest --events events.json --now 2024-01-01T09:00:00
  python -m chamber_events digest --events events.json --days 30 --limit 10
        """,
    )

    parser.add_argument(
        "command",
        choices=("listing", "digest"),
        help="listing: past/this week/upcoming occurrences; digest: newsletter selection",
    )
    parser.add_argument(
        "--events",
        type=Path,
        required=True,
        metavar="FILE",
        help='JSON file with an array of event records or a {"docs": [...]} response',
    )
    parser.add_argument(
        "--now",
        type=_iso_datetime,
        metavar="ISO",
        help="Reference time (default: current time, or CHAMBER_EVENTS_TEST_TIME)",
    )
    parser.add_argument(
        "--days",
        type=_positive_int,
        metavar="N",
        help="Look-ahead in days (default: 365 for listing, 45 for digest)",
    )
    parser.add_argument(
        "--limit",
        type=_positive_int,
        metavar="N",
        help="Maximum occurrences in the digest (default: 5)",
    )
    parser.add_argument(
        "--timezone",
        metavar="TZ",
        help="IANA site timezone (default: CHAMBER_EVENTS_TIMEZONE or America/New_York)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    return parser


def load_event_file(path: Path) -> list[dict[str, Any]]:
    """Read event records from a JSON file.

    Accepts a bare array of records or a CMS list response with a ``docs`` key.

    Raises:
        EventInputError: If the file is missing, not JSON, or not a list of records
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise EventInputError(f"Cannot read events file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise EventInputError(f"Events file {path} is not valid JSON: {e}") from e

    if isinstance(payload, dict) and "docs" in payload:
        payload = payload["docs"]

    if not isinstance(payload, list) or not all(isinstance(r, dict) for r in payload):
        raise EventInputError(f"Events file {path} must contain a list of event objects")

    return payload


def run(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI and return the process exit code."""
    args = _create_parser().parse_args(argv)
    configure_logging(debug_mode=args.debug)

    try:
        config = EngineConfig.from_env()
        if args.timezone:
            config = dataclasses.replace(config, timezone=args.timezone)

        now = (
            to_calendar_datetime(args.now, config.timezone)
            if args.now is not None
            else now_local(config.timezone)
        )
        records = load_event_file(args.events)

        if args.command == "listing":
            if args.days is not None:
                config = dataclasses.replace(config, listing_days=args.days)
            result = build_event_listing(records, now, config=config).to_dict()
        else:
            result = build_newsletter_digest(
                records, now, days=args.days, limit=args.limit, config=config
            ).to_dict()
    except ChamberEventsError as e:
        logger.error("%s", e)
        return EXIT_BAD_INPUT

    json.dump(result, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return EXIT_OK


def main() -> NoReturn:
    """Run the chamber_events CLI."""
    sys.exit(run())


if __name__ == "__main__":
    main()
