from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Optional, Sequence

import orjson

from .config import get_settings
from .logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="boardcal command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    api_parser = subparsers.add_parser("api", help="Start the FastAPI server exposing the calendar functions.")
    api_parser.add_argument("--host", default="127.0.0.1")
    api_parser.add_argument("--port", type=int, default=8000)

    mcp_parser = subparsers.add_parser("mcp", help="Start the FastMCP server.")
    mcp_parser.add_argument("--host", default="127.0.0.1")
    mcp_parser.add_argument("--port", type=int, default=8765)

    month_parser = subparsers.add_parser("month", help="Print the lane layout of a month as JSON.")
    month_parser.add_argument("month", help="Month formatted YYYY-MM.")
    month_parser.add_argument("--viewer", default=None, help="Viewer account id.")

    day_parser = subparsers.add_parser("day", help="Print every item touching a day as JSON.")
    day_parser.add_argument("day", help="Day formatted YYYY-MM-DD.")
    day_parser.add_argument("--month", default=None, help="Month view the day is shown in.")
    day_parser.add_argument("--viewer", default=None, help="Viewer account id.")

    return parser


def _print_json(payload: Any) -> None:
    sys.stdout.write(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode("utf-8") + "\n")


def main(argv: Optional[Sequence[str]] = None) -> None:
    configure_logging(get_settings().log_level)
    logging.getLogger(__name__).info("boardcal CLI starting")
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "api":
        from .services.http import run_local_server

        run_local_server(host=args.host, port=args.port)
    elif args.command == "mcp":
        from .services.mcp import run_mcp_server

        run_mcp_server(host=args.host, port=args.port)
    elif args.command == "month":
        from .api import call_api

        _print_json(call_api("calendar_month_view", month=args.month, viewer_id=args.viewer))
    elif args.command == "day":
        from .api import call_api

        _print_json(call_api("calendar_day", day=args.day, month=args.month, viewer_id=args.viewer))
    else:  # pragma: no cover - argparse enforces choices
        parser.print_help()


if __name__ == "__main__":
    main()
