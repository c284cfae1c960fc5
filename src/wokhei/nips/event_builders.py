"""Nostr event builders for Decentralized List (DCoSL) records.

Standalone functions that turn typed specs into the protocol tag sets and
unsigned event drafts. Used by
[ListService][wokhei.services.lists.ListService] for ``create-header``,
``add-item`` and ``delete``.

All validation happens here, before anything reaches the relay client:

* headers: non-empty ``name`` (``InvalidArgs``), ``d`` iff addressable
  (``HeaderMissingDTag``);
* items: a well-formed ``z`` pointer, ``d`` iff addressable, no explicit
  ``z``/``d`` custom fields (``InvalidArgs``).

See Also:
    [HeaderTagSet][wokhei.models.tags.HeaderTagSet],
    [ItemTagSet][wokhei.models.tags.ItemTagSet]: The typed tag sets and
        their fixed emission order.
    [resolve_parent()][wokhei.services.resolver.resolve_parent]: Produces
        the ``z`` pointer consumed by
        [build_item_tags()][wokhei.nips.event_builders.build_item_tags].
"""

from __future__ import annotations

from dataclasses import dataclass

from nostr_sdk import EventBuilder, Kind, Tag

from wokhei.exceptions import HeaderMissingDTag, InvalidArgs, InvalidCoordinate, InvalidEventId
from wokhei.models._validation import is_hex_id
from wokhei.models.constants import CLIENT_ID, DELETION_KIND, ListKind, TagName
from wokhei.models.coordinate import Coordinate
from wokhei.models.specs import HeaderSpec, ItemSpec
from wokhei.models.tags import HeaderTagSet, ItemTagSet, WireTags


# =============================================================================
# Types
# =============================================================================


@dataclass(frozen=True, slots=True)
class EventDraft:
    """Unsigned event: kind, wire tags and content, ready for signing."""

    kind: int
    tags: WireTags
    content: str = ""

    def to_builder(self) -> EventBuilder:
        """Lower to a ``nostr_sdk.EventBuilder`` (signed by the client)."""
        return EventBuilder(Kind(self.kind), self.content).tags(
            [Tag.parse(tag) for tag in self.tags]
        )


# =============================================================================
# Headers (kinds 9998 / 39998)
# =============================================================================


def default_alt(name: str) -> str:
    return f"DCoSL list header: {name}"


def build_header_tags(spec: HeaderSpec, *, client_id: str = CLIENT_ID) -> HeaderTagSet:
    """Build the tag set of a list header.

    Raises:
        InvalidArgs: If ``name`` is empty.
        HeaderMissingDTag: If the spec is addressable without a d-tag.
    """
    if not spec.name.strip():
        raise InvalidArgs("name must not be empty", fix="Provide --name=<singular>")

    d_tag: str | None = None
    if spec.addressable:
        if not spec.d_tag:
            raise HeaderMissingDTag("addressable header requires a non-empty d-tag")
        d_tag = spec.d_tag

    return HeaderTagSet(
        names=(spec.name, spec.plural or spec.name),
        client=client_id,
        titles=spec.titles,
        description=spec.description,
        required=spec.required,
        recommended=spec.recommended,
        topics=spec.topics,
        alt=spec.alt if spec.alt is not None else default_alt(spec.name),
        d_tag=d_tag,
    )


def build_header_draft(spec: HeaderSpec, *, client_id: str = CLIENT_ID) -> EventDraft:
    """Build the unsigned header event (kind 9998 or 39998)."""
    tags = build_header_tags(spec, client_id=client_id)
    return EventDraft(
        kind=int(ListKind.header(addressable=spec.addressable)),
        tags=tags.to_wire(),
        content=spec.content,
    )


# =============================================================================
# Items (kinds 9999 / 39999)
# =============================================================================


def validate_z_pointer(z: str) -> None:
    """Raise ``InvalidArgs`` unless *z* is an event id or a canonical coordinate."""
    if is_hex_id(z):
        if z != z.lower():
            raise InvalidArgs(f"z pointer {z!r} must be lowercase hex")
        return
    try:
        coord = Coordinate.parse(z)
    except InvalidCoordinate as e:
        raise InvalidArgs(f"z pointer {z!r} is neither an event id nor a coordinate") from e
    if coord.canonicalize() != z:
        raise InvalidArgs(f"z pointer {z!r} is not in canonical form")


def build_item_tags(spec: ItemSpec, z: str) -> ItemTagSet:
    """Build the tag set of a list item linked to its header by *z*.

    Args:
        spec: Item specification.
        z: Resolved parent pointer: the header event id (regular header) or
            its canonical coordinate (addressable header).

    Raises:
        InvalidArgs: If *z* is malformed, the spec is addressable without a
            d-tag, or a custom field tries to set ``z`` or ``d``.
    """
    validate_z_pointer(z)

    d_tag: str | None = None
    if spec.addressable:
        if not spec.d_tag:
            raise InvalidArgs(
                "addressable item requires a non-empty d-tag",
                fix="Pass --d-tag=<identifier> (or --derive-d-tag)",
            )
        d_tag = spec.d_tag

    for custom in spec.fields:
        custom.check_not_reserved()

    return ItemTagSet(z=z, resource=spec.resource, d_tag=d_tag, fields=spec.fields)


def build_item_draft(spec: ItemSpec, z: str) -> EventDraft:
    """Build the unsigned item event (kind 9999 or 39999)."""
    tags = build_item_tags(spec, z)
    return EventDraft(
        kind=int(ListKind.item(addressable=spec.addressable)),
        tags=tags.to_wire(),
        content=spec.content,
    )


# =============================================================================
# Kind 5 (NIP-09)
# =============================================================================


def build_deletion_draft(event_ids: list[str], reason: str = "") -> EventDraft:
    """Build a NIP-09 deletion request for *event_ids*.

    Deletion is a request: relays may or may not honor it.

    Raises:
        InvalidArgs: If *event_ids* is empty.
        InvalidEventId: If any id is malformed.
    """
    if not event_ids:
        raise InvalidArgs("at least one event id is required")
    tags: WireTags = []
    for event_id in event_ids:
        if not is_hex_id(event_id):
            raise InvalidEventId(event_id)
        tags.append([TagName.EVENT.value, event_id.lower()])
    return EventDraft(kind=DELETION_KIND, tags=tags, content=reason)


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    "EventDraft",
    "build_deletion_draft",
    "build_header_draft",
    "build_header_tags",
    "build_item_draft",
    "build_item_tags",
    "default_alt",
    "validate_z_pointer",
]
