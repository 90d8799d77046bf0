"""
=============================================================================
SERVUM CLI ENTRY POINT
=============================================================================

    # Serve the current directory on 127.0.0.1:8080
    python -m servum

    # Serve ./public on all interfaces, port 3000
    servum ./public -a 0.0.0.0 -p 3000

    # Eight workers, no access log, no directory listings
    servum -t 8 -q --no-list-dir

Environment variables (SERVUM_*, see ServerConfig.from_env) provide
defaults; command-line options override them.

Exit codes: 0 after a clean shutdown or --help/--version, 1 on an invalid
argument, an invalid configuration, or a failure to bind.

=============================================================================
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import LOG_FORMATS, ServerConfig
from .server import FileServer


class ArgumentParser(argparse.ArgumentParser):
    """argparse exits with 2 on usage errors; servum exits with 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="servum",
        description="Serve a directory over HTTP with a fixed pool of worker threads",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  servum                         # Serve the current directory
  servum ./public -p 3000        # Serve ./public on port 3000
  servum -a 0.0.0.0              # Listen on all interfaces
  servum -t 8 -q                 # 8 worker threads, no access log
        """,
    )

    parser.add_argument(
        "base_dir",
        metavar="BASE_DIR",
        nargs="?",
        type=Path,
        default=None,
        help="Directory to serve (default: current directory)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--address", "-a",
        dest="host",
        default=None,
        help="Address to bind to (default: 127.0.0.1)",
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: 8080)",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-connection read/write timeout in seconds (default: none)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # SERVING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--threads", "-t",
        type=int,
        default=None,
        help="Number of worker threads (default: 4)",
    )

    parser.add_argument(
        "--no-list-dir",
        dest="list_dir",
        action="store_false",
        default=None,
        help="Answer directory requests with 403 instead of a listing",
    )

    parser.add_argument(
        "--index",
        dest="index_file",
        default=None,
        help="Default document served for '/' (default: index.html)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # OUTPUT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--quiet", "-q",
        dest="verbose",
        action="store_false",
        default=None,
        help="Don't print a line for every request",
    )

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=None,
        help="Access log format (default: text)",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"servum {__version__}",
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """
    Translate parsed arguments to a ServerConfig.

    Options left unset fall through to SERVUM_* environment variables and
    then to the defaults.

    Raises:
        ValueError: If the environment or the resulting values are invalid.
    """
    overrides = {
        name: value
        for name, value in vars(args).items()
        if value is not None
    }
    config = ServerConfig.from_env(**overrides)
    config.validate()
    return config


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
    except ValueError as e:
        parser.exit(1, f"{parser.prog}: error: {e}\n")

    server = FileServer(config)

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
