#!/usr/bin/env python3
"""Send a single message notice — handy for checking endpoint and token.

Usage::

    # Send an info message with the default config
    python scripts/send_notice.py "deploy finished"

    # Custom config, level and custom data
    python scripts/send_notice.py --config config/settings.yaml \\
        --level warning --custom volume=/data "disk full"
"""

from __future__ import annotations

import argparse
import sys

import structlog

from rollbar_notifier.core.config import load_settings
from rollbar_notifier.core.logging import setup_logging
from rollbar_notifier.factory import create_notifier
from rollbar_notifier.notice.types import Severity

logger = structlog.get_logger(__name__)


def _parse_custom(pairs: list[str]) -> dict[str, str]:
    custom: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {pair!r}")
        custom[key] = value
    return custom


def run(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    setup_logging(level=args.log_level, config=settings.logging)

    try:
        custom = _parse_custom(args.custom)
    except argparse.ArgumentTypeError as exc:
        logger.error("bad_custom_data", error=str(exc))
        return 2

    if not settings.notifier.access_token.get_secret_value():
        logger.warning("access_token_missing", endpoint=settings.notifier.endpoint)

    with create_notifier(settings) as notifier:
        pending = notifier.send_message(args.message, args.level, custom)
        logger.info(
            "notice_scheduled",
            level=args.level,
            scheduled=pending.scheduled,
            endpoint=settings.notifier.endpoint,
        )
        notifier.flush(args.timeout)

    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Send one message notice to the configured endpoint.",
    )
    parser.add_argument("message", help="Message text to report")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--level",
        default=Severity.INFO.value,
        choices=[s.value for s in Severity],
        help="Notice severity (default: info)",
    )
    parser.add_argument(
        "--custom",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Custom data entry; may be repeated",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="Seconds to wait for delivery before exiting (default: 10)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override: DEBUG, INFO, WARNING, ERROR",
    )
    args = parser.parse_args()

    sys.exit(run(args))


if __name__ == "__main__":
    main()
