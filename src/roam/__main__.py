#!/usr/bin/env python3
"""
Roam CLI Entry Point

Provides command-line interface for loop generation and leg re-routing.
Run with: python -m roam <command> [args]
"""

import argparse
import json
import sys

from .core import get_utc_timestamp


def output_json(data: dict, indent: int = 2) -> None:
    """Print JSON output to stdout."""
    print(json.dumps(data, indent=indent))


def output_error(message: str, exit_code: int = 1, **kwargs) -> None:
    """Print error JSON and exit."""
    error_data = {
        "error": kwargs.pop("error_type", "error"),
        "message": message,
        "query_timestamp": get_utc_timestamp(),
    }
    error_data.update(kwargs)
    output_json(error_data)
    sys.exit(exit_code)


# =============================================================================
# Built-in Commands
# =============================================================================


def cmd_help(args: argparse.Namespace) -> dict:
    """Show help message."""
    help_text = """
Roam - loop ride generation

Routing Commands:
  loop <lat> <lng> --distance KM [opts]
                             Generate a loop ride starting and ending at lat/lng
                             --bearings DEG [DEG ...], --stretch F, --editable
  segment <from_lat> <from_lng> <to_lat> <to_lng>
                             Route a single leg (map pin drag)

Environment:
  GRAPHHOPPER_API_KEY        Routing oracle API key
  ROAM_ORACLE_BASE_URL       Routing oracle base URL
  ROAM_LOG_LEVEL             DEBUG, INFO, WARNING (default), ERROR
  ROAM_LOG_JSON              Emit JSON log lines on stderr

Examples:
  python -m roam loop 37.7749 -122.4194 --distance 40
  python -m roam loop 37.7749 -122.4194 -d 60 --bearings 90 210 330 --editable
  python -m roam segment 37.77 -122.42 37.80 -122.41
"""
    print(help_text)
    return {}


# =============================================================================
# Main Entry Point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="roam",
        description="Roam - loop ride generation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Built-in commands
    help_parser = subparsers.add_parser("help", help="Show help message")
    help_parser.set_defaults(func=cmd_help)

    from .commands import routing

    routing.register_parsers(subparsers)

    return parser


def main() -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args()

    # Default to help if no command
    if not args.command:
        cmd_help(args)
        return 0

    if not hasattr(args, "func"):
        output_error(
            f"Unknown command: {args.command}",
            error_type="unknown_command",
            hint="Run 'roam help' for usage",
        )

    try:
        result = args.func(args)

        if isinstance(result, dict) and result:
            output_json(result)

            if "error" in result:
                return 1

        return 0

    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
    except Exception as e:
        output_error(str(e), error_type="command_error", command=args.command)
        return 1


if __name__ == "__main__":
    sys.exit(main())
