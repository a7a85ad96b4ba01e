"""Small command-line front end for quick checks against a Carthooks instance.

Settings come from ``CARTHOOKS_*`` environment variables (or ``.env``).

Example usages::

    # Who does the configured static token belong to?
    python -m scripts.carthooks_cli whoami

    # Obtain a client-credentials token first, then ask.
    python -m scripts.carthooks_cli whoami --client-credentials

    # List the first ten items of a collection.
    python -m scripts.carthooks_cli items 123 456 --limit 10
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Optional

import httpx
from pydantic import ValidationError

from carthooks.clients import CarthooksClient
from carthooks.core.config import ClientSettings
from carthooks.core.errors import CONFIGURATION_MISSING
from carthooks.core.logging import configure_logging
from carthooks.schemas.result import Result

EXIT_OK = 0
EXIT_API_ERROR = 1
EXIT_CONFIG_ERROR = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Query the Carthooks API.")
    parser.add_argument("--base-url", help="Override CARTHOOKS_API_URL.")
    parser.add_argument("--debug", action="store_true", help="Echo requests and responses.")
    parser.add_argument(
        "--client-credentials",
        action="store_true",
        help="Obtain a client-credentials token before the call.",
    )
    parser.add_argument(
        "--user-token",
        help="End-user access token to attach to the client-credentials exchange.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("whoami", help="Show the identity behind the current token.")

    items_parser = subparsers.add_parser("items", help="List items of a collection.")
    items_parser.add_argument("app_id", type=int)
    items_parser.add_argument("collection_id", type=int)
    items_parser.add_argument("--limit", type=int, default=20)
    items_parser.add_argument("--start", type=int, default=0)

    return parser


def _report(result: Result) -> int:
    if result.success:
        print(json.dumps(result.data, indent=2, ensure_ascii=False))
        return EXIT_OK

    message = result.error_message
    if result.trace_id:
        message = f"{message} (trace_id={result.trace_id})"
    print(message, file=sys.stderr)
    if result.error_code == CONFIGURATION_MISSING:
        return EXIT_CONFIG_ERROR
    return EXIT_API_ERROR


async def _run(
    args: argparse.Namespace,
    settings: ClientSettings,
    transport: Optional[httpx.AsyncBaseTransport],
) -> int:
    async with CarthooksClient(
        base_url=args.base_url,
        debug=args.debug or None,
        settings=settings,
        transport=transport,
    ) as client:
        if args.client_credentials:
            token_result = await client.initialize_oauth(args.user_token)
            if not token_result.success:
                return _report(token_result)

        if args.command == "whoami":
            return _report(await client.get_current_user())
        return _report(
            await client.get_items(
                args.app_id, args.collection_id, limit=args.limit, start=args.start
            )
        )


def main(
    argv: list[str] | None = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = ClientSettings()
    except ValidationError as exc:
        print(
            "Settings validation failed. Missing or invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_CONFIG_ERROR

    configure_logging("DEBUG" if args.debug else settings.log_level)
    return asyncio.run(_run(args, settings, transport))


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
