"""Command-line interface for HiveRoute."""

import argparse
import json
import sys
from datetime import datetime

import uvicorn

from hiveroute import __version__
from hiveroute.engine import HiveEngine, HiveError
from hiveroute.logging_config import configure_logging
from hiveroute.model import ContextSnapshot, OperatingMode, TimeOfDay, time_of_day_for_hour


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hiveroute",
        description="HiveRoute - multi-specialist query routing and consensus",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the HTTP API server")
    serve.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    serve.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)",
    )
    serve.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )

    ask = commands.add_parser("ask", help="Route a single query and print the answer")
    ask.add_argument("query", help="Query text")
    ask.add_argument("--app", default="", help="Active application bundle id")
    ask.add_argument("--app-name", default="", help="Active application display name")
    ask.add_argument("--clipboard", default=None, help="Clipboard text to consider")
    ask.add_argument(
        "--mode",
        choices=[m.value for m in OperatingMode],
        default=OperatingMode.NORMAL.value,
        help="Operating mode (default: normal)",
    )
    ask.add_argument(
        "--time-of-day",
        choices=[t.value for t in TimeOfDay],
        default=None,
        help="Time-of-day bucket (default: from the local clock)",
    )
    ask.add_argument(
        "--protocol",
        default=None,
        help="majority, tournament, unanimous or synthesis(N)",
    )
    ask.add_argument(
        "--json",
        action="store_true",
        help="Print the full consensus result as JSON",
    )
    return parser


def _serve(parsed: argparse.Namespace) -> int:
    print(f"Starting HiveRoute server at http://{parsed.host}:{parsed.port}")
    print("Press Ctrl+C to stop")

    uvicorn.run(
        "hiveroute.server.app:app",
        host=parsed.host,
        port=parsed.port,
        reload=parsed.reload,
    )
    return 0


def _ask(parsed: argparse.Namespace) -> int:
    time_of_day = (
        TimeOfDay(parsed.time_of_day)
        if parsed.time_of_day
        else time_of_day_for_hour(datetime.now().hour)
    )
    snapshot = ContextSnapshot(
        active_app_id=parsed.app,
        active_app_name=parsed.app_name,
        clipboard_text=parsed.clipboard,
        time_of_day=time_of_day,
        mode=OperatingMode(parsed.mode),
    )
    try:
        with HiveEngine() as engine:
            result = engine.process(parsed.query, snapshot=snapshot, protocol=parsed.protocol)
    except (ValueError, HiveError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if parsed.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(result.final_response)
        if result.winning_species:
            print(
                f"\n[{result.winning_species} · {result.protocol} · "
                f"strength {result.consensus_strength:.2f}]"
            )
    return 0


def main(args: list[str] | None = None) -> int:
    """Run the HiveRoute command line.

    Args:
        args: Command-line arguments. If None, uses sys.argv[1:].

    Returns:
        Exit code (0 for success).
    """
    parsed = _build_parser().parse_args(args)
    configure_logging()

    if parsed.command == "serve":
        return _serve(parsed)
    return _ask(parsed)


if __name__ == "__main__":
    sys.exit(main())
