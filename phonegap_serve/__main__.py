"""Command-line entry for phonegap_serve."""

from __future__ import annotations

import argparse
import sys
from typing import NoReturn, Optional

from . import run_server


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the phonegap_serve CLI."""
    parser = argparse.ArgumentParser(
        prog="phonegap-serve",
        description="Serve a PhoneGap app to a device on the local network",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  phonegap-serve                      # Serve ./www on port 3000
  phonegap-serve --port 8080          # Serve ./www on port 8080
  phonegap-serve --www app/www        # Serve another directory
        """,
    )

    parser.add_argument(
        "--port",
        type=int,
        metavar="PORT",
        help="Port number for the server (default: 3000, or PHONEGAP_SERVE_PORT)",
    )
    parser.add_argument(
        "--host",
        metavar="HOST",
        help="Interface to bind (default: 0.0.0.0, or PHONEGAP_SERVE_HOST)",
    )
    parser.add_argument(
        "--www",
        metavar="DIR",
        help="App directory to serve (default: ./www, or PHONEGAP_SERVE_WWW)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    return parser


def main(argv: Optional[list[str]] = None) -> NoReturn:
    """Run the phonegap_serve CLI."""
    args = _create_parser().parse_args(argv)
    sys.exit(run_server(args))


if __name__ == "__main__":
    main()
