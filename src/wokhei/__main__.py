"""CLI entry point for Wokhei.

Every command prints exactly one JSON document on stdout:

```json
{"ok": true, "command": "list-headers", "result": {...}}
{"ok": false, "command": "add-item", "error": {"code": "INVALID_ARGS", ...}}
```

The exit code is 0 on success and 1 on any error. Logs go to stderr.

Examples:
    ```bash
    python -m wokhei create-header --name playlist --addressable --d-tag jazz
    python -m wokhei add-item --header-coordinate 39998:<pubkey>:jazz --resource https://x
    python -m wokhei list-headers --topic music --limit 10 --offset 20
    python -m wokhei --relay wss://relay.example.com export
    ```
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Any, NoReturn, TextIO

from wokhei.core.config import WokheiConfig, resolve_config
from wokhei.core.logger import LOG_LEVELS, Logger, setup_logging
from wokhei.exceptions import InvalidArgs, WokheiError
from wokhei.models.specs import ById, CustomField, HeaderSpec, ItemSpec, parse_parent_ref
from wokhei.nips.event_builders import build_deletion_draft, build_header_tags
from wokhei.services.lists import ListService
from wokhei.services.query import QueryCommand, QueryParams, build_filter
from wokhei.utils.keys import load_keys_from_env, load_optional_keys
from wokhei.utils.protocol import NostrRelayClient


if TYPE_CHECKING:
    from nostr_sdk import Keys

    from wokhei.core.relay_client import RelayClient


RelayFactory = Callable[[WokheiConfig, "Keys | None"], "RelayClient"]
Request = Callable[[ListService], Awaitable[dict[str, Any]]]

PUBLISHING_COMMANDS = frozenset({"create-header", "add-item", "delete"})

logger = Logger("cli")


class ArgumentParser(argparse.ArgumentParser):
    """Argument parser that raises ``InvalidArgs`` instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise InvalidArgs(message, fix=self.format_usage().strip())


# =============================================================================
# Parser
# =============================================================================


def _add_parent_args(parser: argparse.ArgumentParser, *, required: bool) -> None:
    suffix = "" if required else " (optional)"
    parser.add_argument("--header", metavar="EVENT_ID", help=f"Header event id{suffix}")
    parser.add_argument(
        "--header-coordinate",
        metavar="COORD",
        help=f"Header coordinate 39998:<pubkey>:<d-tag>{suffix}",
    )


def _add_page_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--author", metavar="PUBKEY", help="Only events by this hex pubkey")
    parser.add_argument("--limit", type=int, help="Maximum number of results")
    parser.add_argument("--offset", type=int, default=0, help="Skip this many matches")
    parser.add_argument("--since", type=int, help="Only events created at or after (unix)")
    parser.add_argument("--until", type=int, help="Only events created at or before (unix)")


def build_parser() -> ArgumentParser:
    """Build the ``wokhei`` argument parser."""
    parser = ArgumentParser(prog="wokhei", description="Decentralized List (DCoSL) client")
    parser.add_argument("--relay", help="Relay URL (default: WOKHEI_RELAY, config, built-in)")
    parser.add_argument("--config", type=Path, help="YAML config path (default: WOKHEI_CONFIG)")
    parser.add_argument(
        "--log-level", choices=LOG_LEVELS, default="WARNING", help="Log level (default: WARNING)"
    )

    sub = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    p = sub.add_parser("create-header", help="Publish a list header")
    p.add_argument("--name", required=True, help="Singular list name")
    p.add_argument("--plural", help="Plural list name (default: the singular)")
    p.add_argument("--titles", nargs=2, metavar=("SINGULAR", "PLURAL"), help="Display titles")
    p.add_argument("--description", help="List description")
    p.add_argument("--required", action="append", default=[], metavar="FIELD")
    p.add_argument("--recommended", action="append", default=[], metavar="FIELD")
    p.add_argument("--topic", "-t", action="append", default=[], metavar="TOPIC")
    p.add_argument("--alt", help="Human-readable summary")
    p.add_argument("--content", default="", help="Event content")
    p.add_argument("--addressable", action="store_true", help="Publish as kind 39998")
    p.add_argument("--d-tag", help="Identifier of an addressable header")
    p.add_argument("--derive-d-tag", action="store_true", help="Derive the d-tag from the name")

    p = sub.add_parser("add-item", help="Publish a list item")
    _add_parent_args(p, required=True)
    p.add_argument("--resource", help="Resource value (r tag)")
    p.add_argument("--content", default="", help="Event content")
    p.add_argument("--field", action="append", default=[], metavar="KEY=VALUE")
    p.add_argument("--addressable", action="store_true", help="Publish as kind 39999")
    p.add_argument("--d-tag", help="Identifier of an addressable item")
    p.add_argument("--derive-d-tag", action="store_true", help="Derive the d-tag from the resource")
    p.add_argument("--z-tag", help=argparse.SUPPRESS)

    p = sub.add_parser("list-headers", help="List headers")
    _add_page_args(p)
    p.add_argument("--topic", "-t", help="Only headers with this topic")
    p.add_argument("--name", help="Case-sensitive substring of the singular name")

    p = sub.add_parser("list-items", help="List the items of a header")
    _add_parent_args(p, required=True)
    _add_page_args(p)

    p = sub.add_parser("count", help="Count headers and items")
    _add_parent_args(p, required=False)
    p.add_argument("--author", metavar="PUBKEY")
    p.add_argument("--topic", "-t")

    p = sub.add_parser("export", help="Export headers with all their items")
    p.add_argument("--author", metavar="PUBKEY")
    p.add_argument("--topic", "-t")

    p = sub.add_parser("inspect", help="Show one event")
    p.add_argument("event_id")

    p = sub.add_parser("delete", help="Request deletion of events (NIP-09)")
    p.add_argument("event_ids", nargs="+", metavar="EVENT_ID")
    p.add_argument("--reason", default="")

    return parser


# =============================================================================
# Request preparation (no network access)
# =============================================================================


def _check_d_tag_flags(args: argparse.Namespace) -> None:
    if args.d_tag is not None and not args.addressable:
        raise InvalidArgs(
            "--d-tag requires --addressable", fix="Add --addressable, or drop --d-tag"
        )


def _page_params(args: argparse.Namespace, command: QueryCommand) -> QueryParams:
    params = QueryParams(
        author=getattr(args, "author", None),
        topic=getattr(args, "topic", None),
        name=getattr(args, "name", None),
        limit=getattr(args, "limit", None),
        offset=getattr(args, "offset", 0),
        since=getattr(args, "since", None),
        until=getattr(args, "until", None),
    )
    if command in (QueryCommand.LIST_ITEMS, QueryCommand.COUNT):
        # z is resolved later; validate the remaining fields on a header filter
        build_filter(QueryCommand.LIST_HEADERS, replace(params, z=None))
    else:
        build_filter(command, params)
    return params


def prepare_request(args: argparse.Namespace) -> Request:
    """Validate *args* and return the service call to run.

    Raises:
        WokheiError: Any validation error, before a relay is contacted.
    """
    command = args.command

    if command == "create-header":
        _check_d_tag_flags(args)
        spec = HeaderSpec(
            name=args.name,
            plural=args.plural,
            titles=tuple(args.titles) if args.titles else None,
            description=args.description,
            required=tuple(args.required),
            recommended=tuple(args.recommended),
            topics=tuple(args.topic),
            alt=args.alt,
            addressable=args.addressable,
            d_tag=args.d_tag,
            content=args.content,
        )
        # a derived d-tag needs the signing key, so only the rest is checked here
        build_header_tags(replace(spec, addressable=False) if args.derive_d_tag else spec)
        derive = args.derive_d_tag
        return lambda service: service.create_header(spec, derive_d_tag=derive)

    if command == "add-item":
        if args.z_tag is not None:
            raise InvalidArgs(
                "The z tag cannot be set explicitly",
                fix="z is derived from --header or --header-coordinate",
            )
        _check_d_tag_flags(args)
        item = ItemSpec(
            parent=parse_parent_ref(event_id=args.header, coordinate=args.header_coordinate),
            resource=args.resource,
            content=args.content,
            fields=tuple(CustomField.parse(raw) for raw in args.field),
            addressable=args.addressable,
            d_tag=args.d_tag,
        )
        derive = args.derive_d_tag
        return lambda service: service.add_item(item, derive_d_tag=derive)

    if command == "list-headers":
        params = _page_params(args, QueryCommand.LIST_HEADERS)
        return lambda service: service.list_headers(params)

    if command == "list-items":
        parent = parse_parent_ref(event_id=args.header, coordinate=args.header_coordinate)
        params = _page_params(args, QueryCommand.LIST_ITEMS)
        return lambda service: service.list_items(parent, params)

    if command == "count":
        count_parent = None
        if args.header is not None or args.header_coordinate is not None:
            count_parent = parse_parent_ref(event_id=args.header, coordinate=args.header_coordinate)
        params = _page_params(args, QueryCommand.COUNT)
        return lambda service: service.count(params, parent=count_parent)

    if command == "export":
        params = _page_params(args, QueryCommand.EXPORT)
        return lambda service: service.export(params)

    if command == "inspect":
        event_id = ById(args.event_id).event_id
        return lambda service: service.inspect(event_id)

    if command == "delete":
        build_deletion_draft(args.event_ids, args.reason)
        event_ids, reason = list(args.event_ids), args.reason
        return lambda service: service.delete(event_ids, reason)

    raise InvalidArgs(f"Unknown command: {command}")


# =============================================================================
# Entry points
# =============================================================================


def default_relay_factory(config: WokheiConfig, keys: Keys | None) -> RelayClient:
    return NostrRelayClient.from_config(config, keys=keys)


async def run_command(
    args: argparse.Namespace,
    config: WokheiConfig,
    relay_factory: RelayFactory = default_relay_factory,
) -> dict[str, Any]:
    """Validate, load keys, open the relay session and run one command."""
    request = prepare_request(args)
    if args.command in PUBLISHING_COMMANDS:
        keys = load_keys_from_env(config.keys_env)
    else:
        keys = load_optional_keys(config.keys_env)

    async with relay_factory(config, keys) as relay:
        logger.debug("command_started", command=args.command, relay=relay.url)
        return await request(ListService(relay, config))


async def main(
    argv: list[str] | None = None,
    *,
    relay_factory: RelayFactory = default_relay_factory,
    stdout: TextIO | None = None,
) -> int:
    """Parse *argv*, run the command and print the JSON envelope.

    Returns:
        Exit code: 0 for success, 1 for failure.
    """
    command: str | None = None
    try:
        args = build_parser().parse_args(argv)
        command = args.command
        setup_logging(args.log_level)
        config = resolve_config(config_path=args.config, relay=args.relay)
        result = await run_command(args, config, relay_factory)
        envelope: dict[str, Any] = {"ok": True, "command": command, "result": result}
        exit_code = 0
    except WokheiError as e:
        logger.debug("command_failed", command=command, code=e.code, error=e.message)
        envelope = {"ok": False, "command": command, "error": e.to_dict()}
        exit_code = 1

    out = stdout if stdout is not None else sys.stdout
    out.write(json.dumps(envelope, indent=2, ensure_ascii=False) + "\n")
    return exit_code


def cli() -> None:
    """Synchronous entry point for console_scripts."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
