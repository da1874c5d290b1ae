"""Command-line entry point: run one check cycle and print the board."""

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path

from .checker import COMMITTED, ERROR, SOURCES, CheckResult
from .config import ConfigError, configure_logging, load_settings
from .date_window import parse_utc_offset
from .render import render_status_board

MARKERS = {COMMITTED: "[x]", ERROR: "[!]"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="daily-commit-checker",
        description="Check whether each participant has committed today.",
    )
    parser.add_argument("--source", choices=sorted(SOURCES), help="Activity source (default: calendar)")
    parser.add_argument("--timezone", help="Offset or zone that defines today, e.g. +09:00")
    parser.add_argument(
        "--participant",
        action="append",
        dest="participants",
        metavar="LOGIN",
        help="Check this login instead of the configured roster (repeatable)",
    )
    parser.add_argument("--png", type=Path, help="Also write the status board to this PNG file")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    return parser


def format_result(result: CheckResult) -> str:
    lines = [f"Daily commit status for {result.window.day.isoformat()}"]
    for username in result.participants:
        outcome = result.outcome(username)
        marker = MARKERS.get(outcome, "[ ]")
        detail = result.errors[username] if outcome == ERROR else outcome
        lines.append(f"{marker} {username}: {detail}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
        overrides = {}
        if args.source:
            overrides["source"] = args.source
        if args.timezone:
            overrides["timezone_name"] = args.timezone
            overrides["tz"] = parse_utc_offset(args.timezone)
        if args.participants:
            overrides["participants"] = tuple(args.participants)
        settings = replace(settings, **overrides)
    except (ConfigError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    configure_logging(settings.log_level)
    result = settings.make_checker().run_check()

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_result(result))

    if args.png:
        args.png.write_bytes(render_status_board(result, source=settings.source))
        print(f"Status board written to {args.png}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
