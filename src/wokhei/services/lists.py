"""List command surface.

[ListService][wokhei.services.lists.ListService] is what the CLI (or any
embedding program) calls: one method per command, each returning a
JSON-ready dict and raising a [WokheiError][wokhei.exceptions.WokheiError]
subclass on failure.

| method | command |
| --- | --- |
| ``create_header`` | publish a list header (kind 9998 / 39998) |
| ``add_item`` | resolve the parent, publish a list item (kind 9999 / 39999) |
| ``list_headers`` | enumerate headers |
| ``list_items`` | enumerate the items of one header |
| ``count`` | count headers and items |
| ``export`` | every header with all of its items |
| ``inspect`` | one event by id |
| ``delete`` | NIP-09 deletion request |

Input validation always runs before the relay is contacted.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any

from wokhei.core.config import WokheiConfig
from wokhei.core.logger import Logger
from wokhei.exceptions import InvalidArgs, KeysNotFound, NoResults
from wokhei.models.coordinate import Coordinate
from wokhei.nips.dtag import header_dtag, item_dtag
from wokhei.nips.event_builders import (
    build_deletion_draft,
    build_header_draft,
    build_item_draft,
)

from .query import QueryEngine, QueryParams, event_to_dict
from .resolver import resolve_parent


if TYPE_CHECKING:
    from wokhei.core.relay_client import RelayClient
    from wokhei.models.specs import HeaderSpec, ItemSpec, ParentRef


class ListService:
    """Commands over one relay session.

    Args:
        relay: Connected relay client. Publishing commands need a client
            with signing keys.
        config: Client configuration (``client_id`` and query settings).

    Examples:
        ```python
        async with NostrRelayClient.from_config(config, keys=keys) as relay:
            service = ListService(relay, config)
            header = await service.create_header(
                HeaderSpec(name="playlist", addressable=True, d_tag="jazz")
            )
        ```
    """

    def __init__(self, relay: RelayClient, config: WokheiConfig | None = None) -> None:
        self._relay = relay
        self._config = config or WokheiConfig()
        self._engine = QueryEngine(relay, self._config.query)
        self._logger = Logger("lists")

    @property
    def engine(self) -> QueryEngine:
        return self._engine

    def _require_author(self, purpose: str) -> str:
        author = self._relay.public_key()
        if author is None:
            raise KeysNotFound(f"{purpose} requires a signing key")
        return author

    # -------------------------------------------------------------------------
    # Publishing
    # -------------------------------------------------------------------------

    async def create_header(
        self, spec: HeaderSpec, *, derive_d_tag: bool = False
    ) -> dict[str, Any]:
        """Publish a list header.

        Args:
            spec: Header specification.
            derive_d_tag: Derive the d-tag from the name and the signing
                key (addressable headers only, exclusive with an explicit
                d-tag).

        Raises:
            InvalidArgs: On an empty name or a misused ``derive_d_tag``.
            HeaderMissingDTag: If addressable without a d-tag.
            KeysNotFound: If the relay client cannot sign.
        """
        if derive_d_tag:
            if not spec.addressable:
                raise InvalidArgs("--derive-d-tag requires --addressable")
            if spec.d_tag:
                raise InvalidArgs("--derive-d-tag and --d-tag are mutually exclusive")
            author = self._require_author("Deriving a header d-tag")
            spec = replace(spec, d_tag=header_dtag(spec.name, author))

        draft = build_header_draft(spec, client_id=self._config.client_id)
        published = await self._relay.publish(draft)

        result: dict[str, Any] = {
            "event_id": published.event_id,
            "kind": draft.kind,
            "pubkey": published.author,
            "name": spec.name,
            "tags": draft.tags,
        }
        if spec.addressable and spec.d_tag:
            result["d_tag"] = spec.d_tag
            result["coordinate"] = Coordinate.for_event(
                draft.kind, published.author, spec.d_tag
            ).canonicalize()
        self._logger.info("header_created", event_id=published.event_id, kind=draft.kind)
        return result

    async def add_item(self, spec: ItemSpec, *, derive_d_tag: bool = False) -> dict[str, Any]:
        """Resolve the item's parent and publish the item.

        Args:
            spec: Item specification.
            derive_d_tag: Derive the d-tag from the resolved parent and the
                resource value (addressable items only).

        Raises:
            InvalidArgs: On reserved custom fields, a missing d-tag, or a
                misused ``derive_d_tag``.
            HeaderNotFound: If the parent id does not resolve to a header.
            KeysNotFound: If the relay client cannot sign.
        """
        for custom in spec.fields:
            custom.check_not_reserved()
        if derive_d_tag:
            if not spec.addressable:
                raise InvalidArgs("--derive-d-tag requires --addressable")
            if spec.d_tag:
                raise InvalidArgs("--derive-d-tag and --d-tag are mutually exclusive")
            if not spec.resource:
                raise InvalidArgs(
                    "--derive-d-tag needs --resource as the item anchor",
                    fix="Pass --resource=<value>, or give --d-tag explicitly",
                )
        elif spec.addressable and not spec.d_tag:
            raise InvalidArgs(
                "addressable item requires a non-empty d-tag",
                fix="Pass --d-tag=<identifier> (or --derive-d-tag)",
            )

        z = await resolve_parent(spec.parent, self._relay)
        if derive_d_tag:
            spec = replace(spec, d_tag=item_dtag(z, spec.resource or ""))

        draft = build_item_draft(spec, z)
        published = await self._relay.publish(draft)

        result: dict[str, Any] = {
            "event_id": published.event_id,
            "kind": draft.kind,
            "pubkey": published.author,
            "z": z,
            "tags": draft.tags,
        }
        if spec.addressable:
            result["d_tag"] = spec.d_tag
        self._logger.info("item_created", event_id=published.event_id, kind=draft.kind, z=z)
        return result

    async def delete(self, event_ids: list[str], reason: str = "") -> dict[str, Any]:
        """Publish a NIP-09 deletion request for *event_ids*.

        Relays may ignore the request; the result only confirms it was
        accepted for publication.
        """
        draft = build_deletion_draft(event_ids, reason)
        published = await self._relay.publish(draft)
        deleted = [tag[1] for tag in draft.tags]
        self._logger.info("deletion_requested", event_id=published.event_id, targets=len(deleted))
        return {
            "event_id": published.event_id,
            "kind": draft.kind,
            "pubkey": published.author,
            "deleted": deleted,
        }

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def list_headers(self, params: QueryParams | None = None) -> dict[str, Any]:
        """Enumerate headers.

        Raises:
            NoResults: If the refined result is empty.
        """
        headers = await self._engine.list_headers(params)
        if not headers:
            raise NoResults(
                "No list headers matched",
                fix="Try different filters, or create one with: wokhei create-header --name=<name>",
            )
        return {"count": len(headers), "headers": [event_to_dict(h) for h in headers]}

    async def list_items(
        self, parent: ParentRef, params: QueryParams | None = None
    ) -> dict[str, Any]:
        """Enumerate the items of the header referenced by *parent*.

        Raises:
            HeaderNotFound: If an id reference does not resolve to a header.
            NoResults: If the refined result is empty.
        """
        z = await resolve_parent(parent, self._relay)
        items = await self._engine.list_items(replace(params or QueryParams(), z=z))
        if not items:
            raise NoResults(
                f"No items linked to {z}",
                fix="Add one with: wokhei add-item --header=<id> --resource=<value>",
            )
        return {"count": len(items), "z": z, "items": [event_to_dict(i) for i in items]}

    async def count(
        self, params: QueryParams | None = None, *, parent: ParentRef | None = None
    ) -> dict[str, Any]:
        """Count headers and items (items of *parent* only when given)."""
        params = params or QueryParams()
        if parent is not None:
            params = replace(params, z=await resolve_parent(parent, self._relay))
        counts: dict[str, Any] = dict(await self._engine.count(params))
        if params.z:
            counts["z"] = params.z
        return counts

    async def export(self, params: QueryParams | None = None) -> dict[str, Any]:
        return (await self._engine.export(params)).to_dict()

    async def inspect(self, event_id: str) -> dict[str, Any]:
        """Fetch one event by id and render it with convenience fields."""
        return event_to_dict(await self._engine.inspect(event_id))
