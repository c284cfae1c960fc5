"""Parent resolution: turn a header reference into an item's ``z`` pointer.

Two paths, selected by the [ParentRef][wokhei.models.specs.ParentRef]
variant:

* [ByCoordinate][wokhei.models.specs.ByCoordinate]: detached mode. The
  coordinate is self-describing, so the pointer is its canonical form and
  the relay is never contacted. This is also the only form that stays
  valid across relays.
* [ById][wokhei.models.specs.ById]: one fetch. The id does not say whether
  the header is regular or addressable, so the event is fetched and
  inspected:

  | fetched kind | ``z`` pointer |
  | --- | --- |
  | 9998 | the event id |
  | 39998 | ``39998:<author>:<d-tag>`` (needs a ``d`` tag) |
  | anything else | [HeaderNotFound][wokhei.exceptions.HeaderNotFound] |
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from wokhei.core.logger import Logger
from wokhei.exceptions import HeaderMissingDTag, HeaderNotFound
from wokhei.models.constants import ListKind
from wokhei.models.coordinate import Coordinate
from wokhei.models.specs import ByCoordinate, ById, parse_parent_ref


if TYPE_CHECKING:
    from wokhei.core.relay_client import RelayClient
    from wokhei.models.event import ListEvent
    from wokhei.models.specs import ParentRef


_logger = Logger("resolver")


def pointer_for_header(event: ListEvent) -> str:
    """Return the ``z`` pointer of a fetched header event.

    Raises:
        HeaderMissingDTag: If an addressable header has no ``d`` tag.
        HeaderNotFound: If the event is not a list header.
    """
    if event.kind == ListKind.HEADER:
        return event.id
    if event.kind == ListKind.ADDRESSABLE_HEADER:
        d_tag = event.d_tag
        if not d_tag:
            raise HeaderMissingDTag(
                f"Addressable header {event.id} has no d tag",
                fix="Republish the header with a d tag, or reference it by coordinate",
            )
        return Coordinate.for_event(event.kind, event.author, d_tag).canonicalize()
    raise HeaderNotFound(event.id, f"event has kind {event.kind}, not a list header")


async def resolve_parent(ref: ParentRef, relay: RelayClient) -> str:
    """Resolve *ref* into the ``z`` pointer linking an item to its header.

    Args:
        ref: Header reference.
        relay: Relay client, only used for id references.

    Returns:
        The header event id, or the canonical header coordinate.

    Raises:
        HeaderNotFound: If the id lookup returns nothing or a non-header.
        HeaderMissingDTag: If the fetched addressable header lacks ``d``.
        RelayUnreachable: Propagated from the relay client.
    """
    if isinstance(ref, ByCoordinate):
        z = ref.coordinate.canonicalize()
        _logger.debug("parent_resolved", mode="coordinate", z=z)
        return z

    if isinstance(ref, ById):
        event = await relay.fetch_by_id(ref.event_id)
        if event is None:
            raise HeaderNotFound(ref.event_id)
        z = pointer_for_header(event)
        _logger.debug("parent_resolved", mode="id", kind=event.kind, z=z)
        return z

    raise TypeError(f"ref must be ById or ByCoordinate, got {type(ref).__name__}")


async def resolve(
    relay: RelayClient,
    *,
    event_id: str | None = None,
    coordinate: str | None = None,
) -> str:
    """Resolve raw user input: exactly one of *event_id* and *coordinate*.

    Raises:
        InvalidArgs: If both or neither are given.
        InvalidEventId: If *event_id* is malformed (before any fetch).
        InvalidCoordinate: If *coordinate* is malformed.
    """
    ref = parse_parent_ref(event_id=event_id, coordinate=coordinate)
    return await resolve_parent(ref, relay)
