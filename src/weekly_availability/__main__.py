"""
Weekly Availability MCP CLI entry point.

Usage:
    python -m weekly_availability serve                       # Run MCP server
    python -m weekly_availability expand --rules rules.json \\
        --start 2025-01-13 --end 2025-01-20 --timezone Europe/London
    python -m weekly_availability free --rules rules.json --busy busy.json \\
        --start 2025-01-13 --end 2025-01-20 --min-minutes 30
"""

import argparse
import json
import logging
import sys
from pathlib import Path


def _load_json_list(path: str) -> list:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list")
    return data


def _add_window_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--rules", "-r",
        required=True,
        metavar="FILE",
        help="JSON list of weekly rules"
    )
    parser.add_argument("--start", "-s", required=True, help="Window start (ISO date/datetime)")
    parser.add_argument("--end", "-e", required=True, help="Window end (ISO date/datetime)")
    parser.add_argument(
        "--timezone", "-t",
        default=None,
        help="IANA timezone of the rules (default from settings)"
    )


def run_query(action: str, args: argparse.Namespace) -> int:
    """Run an availability action and print the JSON result. Returns exit code."""
    from weekly_availability.tools.availability import availability

    kwargs = {
        "action": action,
        "time_min": args.start,
        "time_max": args.end,
        "weekly_rules": _load_json_list(args.rules),
        "timezone": args.timezone,
    }
    if action == "free_slots":
        kwargs["busy"] = _load_json_list(args.busy) if args.busy else []
        kwargs["min_duration_minutes"] = args.min_minutes

    result = availability(**kwargs)
    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 1 if "error" in result else 0


def main():
    parser = argparse.ArgumentParser(
        prog="weekly-availability-mcp",
        description="Recurring weekly availability MCP server"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # serve command
    subparsers.add_parser("serve", help="Run MCP server")

    # expand command
    expand_parser = subparsers.add_parser("expand", help="Expand weekly rules into intervals")
    _add_window_arguments(expand_parser)

    # free command
    free_parser = subparsers.add_parser("free", help="Free intervals after busy time")
    _add_window_arguments(free_parser)
    free_parser.add_argument(
        "--busy", "-b",
        metavar="FILE",
        help="JSON list of busy intervals"
    )
    free_parser.add_argument(
        "--min-minutes", "-m",
        type=int,
        default=None,
        dest="min_minutes",
        help="Drop free intervals shorter than this"
    )

    args = parser.parse_args()

    from weekly_availability.settings import settings

    # stdout is the stdio transport, log to stderr
    logging.basicConfig(
        level=settings.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    if args.command == "expand":
        sys.exit(run_query("expand", args))

    elif args.command == "free":
        sys.exit(run_query("free_slots", args))

    elif args.command == "serve":
        from weekly_availability.server import serve
        serve()

    elif args.command is None:
        # Default to serve if no command given
        from weekly_availability.server import serve
        serve()

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
