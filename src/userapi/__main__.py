"""
=============================================================================
USERAPI CLI ENTRY POINT
=============================================================================

    # Run with defaults (127.0.0.1:8000, Basic auth admin/admin)
    python -m userapi

    # Custom port, all interfaces
    python -m userapi --host 0.0.0.0 --port 9000

    # JSON access log, more workers
    python -m userapi --log-format json --workers 8

    # Refuse a second registration with the same login
    python -m userapi --reject-duplicate-logins

=============================================================================
"""

import argparse
import sys

from . import __version__
from .app import create_app
from .config import ServerConfig, LOG_LEVELS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="userapi",
        description="Greeting and user registration service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m userapi                          # Run with defaults
  python -m userapi --port 9000              # Custom port
  python -m userapi --host 0.0.0.0           # Listen on all interfaces
  python -m userapi --no-auth                # /api/hello without Basic auth
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1, use 0.0.0.0 for containers)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=8000,
        help="Port to listen on (default: 8000)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # PERFORMANCE ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=4,
        help="Number of worker threads (default: 4, max will be 2x this)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=list(LOG_LEVELS),
        default="INFO",
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default="text",
        help="Access log format (default: text)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # APPLICATION ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--no-auth",
        action="store_true",
        help="Disable Basic authentication on /api/hello"
    )

    parser.add_argument(
        "--realm",
        default="myrealm",
        help="Basic authentication realm (default: myrealm)"
    )

    parser.add_argument(
        "--reject-duplicate-logins",
        action="store_true",
        help="Answer 400 instead of replacing a user whose login already exists"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    return ServerConfig(
        host=args.host,
        port=args.port,
        min_workers=args.workers,
        max_workers=args.workers * 2,
        log_level=args.log_level,
        log_format=args.log_format,
        auth_enabled=not args.no_auth,
        auth_realm=args.realm,
        reject_duplicate_logins=args.reject_duplicate_logins,
    )


def main(argv=None):
    """Parse arguments, build the app and serve until interrupted."""
    args = build_parser().parse_args(argv)

    try:
        server = create_app(config_from_args(args))
        server.run()
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# 1. Parse command-line arguments
# 2. Turn them into a ServerConfig (validated by HTTPServer)
# 3. create_app() wires middleware and both endpoints
# 4. Run the server (blocking)
# =============================================================================
