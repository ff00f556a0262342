"""hostlog Command Line Interface.

Provides CLI commands for emitting log lines, replaying a demo workload
and inspecting the environment snapshot.
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from hostlog.logger import Logger
from hostlog.records import LOG_LEVELS
from hostlog.version import __version__

if TYPE_CHECKING:
    from argparse import Namespace


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="hostlog",
        description="hostlog - structured logging with host facts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hostlog emit info "User signed in" --context '{"user_id": 42}'
  hostlog demo --format elasticsearch --no-system-info
  hostlog snapshot

Set HOSTLOG_ENVIRONMENT=development for colorized console output.
        """,
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Options shared by every logging command
    logger_options = argparse.ArgumentParser(add_help=False)
    logger_options.add_argument(
        "--service",
        type=str,
        default="hostlog-cli",
        help="Service name written into each record (default: hostlog-cli)",
    )
    logger_options.add_argument(
        "--format",
        choices=["datadog", "elasticsearch"],
        default="datadog",
        help="Production record schema (default: datadog)",
    )
    logger_options.add_argument(
        "--no-system-info",
        action="store_true",
        help="Do not attach the 'inferred' environment snapshot",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Emit command
    emit_parser = subparsers.add_parser(
        "emit", parents=[logger_options], help="Write a single log line"
    )
    emit_parser.add_argument("level", choices=LOG_LEVELS, help="Severity")
    emit_parser.add_argument("message", type=str, help="Log message")
    emit_parser.add_argument(
        "--context",
        type=_json_argument,
        default=None,
        help="JSON payload merged into (object) or attached to (other) the record",
    )

    # Demo command
    subparsers.add_parser(
        "demo",
        parents=[logger_options],
        help="Replay a realistic application workload at every severity",
    )

    # Snapshot command
    subparsers.add_parser(
        "snapshot", help="Print the environment snapshot as indented JSON"
    )

    return parser


def _json_argument(value: str) -> Any:
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        msg = f"invalid JSON: {exc.msg}"
        raise argparse.ArgumentTypeError(msg) from exc


def _build_logger(args: Namespace) -> Logger:
    return Logger(
        {
            "service_name": args.service,
            "format": args.format,
            "include_system_info": not args.no_system_info,
        }
    )


def run_emit(args: Namespace) -> int:
    """Write one log line."""
    logger = _build_logger(args)
    getattr(logger, args.level)(args.message, args.context)
    return 0


def run_demo(args: Namespace) -> int:
    """Replay the demo workload."""
    logger = _build_logger(args)
    now = datetime.now(UTC)

    logger.info(
        "Application started",
        {"version": __version__, "port": 8000, "host": "0.0.0.0"},
    )
    logger.debug(
        "Database connection pool initialized",
        {"pool_size": 10, "max_connections": 50, "idle_timeout": 30000},
    )
    logger.info(
        "API request received",
        {
            "method": "POST",
            "path": "/api/v1/users",
            "headers": {
                "content-type": "application/json",
                "x-request-id": "req-12345-abcde",
            },
            "query_params": {"page": 1, "limit": 20, "order": "desc"},
            "ip": "192.168.1.100",
        },
    )
    logger.info(
        "Database query executed",
        {
            "query": "SELECT * FROM users WHERE status = %s LIMIT %s",
            "params": ["active", 20],
            "execution_time": 45.23,
            "rows_returned": 15,
        },
    )
    logger.warn(
        "User login attempt failed: Invalid password",
        {
            "usr.id": 101,
            "request.ip": "192.168.1.100",
            "dd.trace_id": "7488833333333333333",
            "dd.span_id": "1234567890123456789",
        },
    )
    logger.warn(
        "Rate limit approaching",
        {
            "user_id": "user-12345",
            "current_requests": 95,
            "limit": 100,
            "reset_at": now + timedelta(seconds=30),
        },
    )
    logger.error(
        "External API call failed",
        {
            "endpoint": "https://api.payment.example/v1/charge",
            "status_code": 503,
            "retries": 3,
            "error": {
                "code": "SERVICE_UNAVAILABLE",
                "details": {"region": "us-east-1"},
            },
        },
    )
    logger.fatal(
        "Application crash imminent",
        {
            "reason": "Out of memory",
            "last_actions": [
                "Processing large batch job",
                "Generating report",
            ],
            "timestamp": now,
        },
    )
    logger.info("Batch processing completed", ["batch-78901", 10000, 3])

    for level in LOG_LEVELS:
        getattr(logger, level)(f"Health check: {level}")
    return 0


def run_snapshot(args: Namespace) -> int:  # noqa: ARG001
    """Print the environment snapshot."""
    from hostlog.inferred import capture_snapshot

    print(json.dumps(capture_snapshot(), indent=2, ensure_ascii=False))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    command_handlers = {
        "emit": run_emit,
        "demo": run_demo,
        "snapshot": run_snapshot,
    }

    handler = command_handlers.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
