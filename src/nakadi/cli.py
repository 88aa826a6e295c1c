"""
Subscription management CLI.

Prints results as JSON on stdout; logs go to stderr.

Exit codes:
    0   success
    1   remote rejection or undecodable response
    2   connection failure or retry budget exhausted
    130 cancelled
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from config.config import NakadiConfig, load_config
from core.errors.exceptions import (
    ConnectionError,
    NakadiError,
    OperationCancelledError,
    RetryExhaustedError,
)
from core.logging.setup import setup_logging
from core.utils.json_serializers import json_serializer
from nakadi.client import Client
from nakadi.schemas import Subscription
from nakadi.subscriptions import SubscriptionAPI

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REMOTE = 1
EXIT_CONNECTION = 2
EXIT_CANCELLED = 130


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, default=json_serializer))


async def cmd_get(api: SubscriptionAPI, args: argparse.Namespace) -> int:
    """Execute get command."""
    subscription = await api.get(args.subscription_id)
    _print_json(subscription)
    return EXIT_OK


async def cmd_list(api: SubscriptionAPI, args: argparse.Namespace) -> int:
    """Execute list command."""
    subscriptions = await api.list()
    _print_json(subscriptions)
    return EXIT_OK


async def cmd_create(api: SubscriptionAPI, args: argparse.Namespace) -> int:
    """Execute create command."""
    subscription = Subscription(
        owning_application=args.owning_application,
        event_types=args.event_types or [],
        consumer_group=args.consumer_group,
        read_from=args.read_from,
    )
    created = await api.create(subscription)
    _print_json(created)
    return EXIT_OK


async def cmd_delete(api: SubscriptionAPI, args: argparse.Namespace) -> int:
    """Execute delete command."""
    await api.delete(args.subscription_id)
    return EXIT_OK


def exit_code_for(error: NakadiError) -> int:
    """Map a classified error to the process exit code."""
    if isinstance(error, OperationCancelledError):
        return EXIT_CANCELLED
    if isinstance(error, (ConnectionError, RetryExhaustedError)):
        return EXIT_CONNECTION
    return EXIT_REMOTE


async def run(config: NakadiConfig, args: argparse.Namespace) -> int:
    """Build the client for ``config`` and run the selected command."""
    async with Client(config.url, config.client_options()) as client:
        api = SubscriptionAPI(client, config.subscriptions)
        try:
            return await args.func(api, args)
        except NakadiError as e:
            logger.error("%s", e, extra={"error_type": type(e).__name__})
            return exit_code_for(e)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nakadi",
        description="Nakadi subscription management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # List subscriptions
    python -m nakadi subscriptions list

    # Create a subscription with retry enabled
    python -m nakadi --retry subscriptions create --owning-application my-app --event-type order.created

    # Delete a subscription
    python -m nakadi subscriptions delete 7dd69d58-7f20-11e7-9748-133d6a0dbfb3
        """,
    )
    parser.add_argument("--config", type=Path, help="Path to config YAML file")
    parser.add_argument("--url", help="Broker base URL (overrides config)")
    parser.add_argument(
        "--retry", action="store_true", help="Retry connection failures with backoff"
    )
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    resources = parser.add_subparsers(dest="resource", help="Resource type")
    subscriptions = resources.add_parser("subscriptions", help="Manage subscriptions")
    commands = subscriptions.add_subparsers(dest="command", help="Available commands")

    parser_get = commands.add_parser("get", help="Show one subscription")
    parser_get.add_argument("subscription_id", help="Subscription id")
    parser_get.set_defaults(func=cmd_get)

    parser_list = commands.add_parser("list", help="List subscriptions")
    parser_list.set_defaults(func=cmd_list)

    parser_create = commands.add_parser("create", help="Create a subscription")
    parser_create.add_argument("--owning-application", required=True)
    parser_create.add_argument(
        "--event-type",
        dest="event_types",
        action="append",
        help="Event type name (repeatable)",
    )
    parser_create.add_argument("--consumer-group")
    parser_create.add_argument("--read-from", choices=["begin", "end", "cursors"])
    parser_create.set_defaults(func=cmd_create)

    parser_delete = commands.add_parser("delete", help="Delete a subscription")
    parser_delete.add_argument("subscription_id", help="Subscription id")
    parser_delete.set_defaults(func=cmd_delete)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    # Load environment variables from .env file before any config access
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        json_format=args.json_logs,
        component="cli",
    )

    config = load_config(args.config)
    if args.url:
        config = replace(config, url=args.url)
    if args.retry:
        config = replace(config, subscriptions=replace(config.subscriptions, retry=True))

    try:
        return asyncio.run(run(config, args))
    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user.", file=sys.stderr)
        return EXIT_CANCELLED


if __name__ == "__main__":
    sys.exit(main())
