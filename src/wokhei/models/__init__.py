"""Pure data models for Decentralized List records.

The models layer is the foundation of the package. It performs no I/O: every
model is a frozen dataclass validated in ``__post_init__`` so invalid
instances never escape the constructor.

Attributes:
    ListKind: The four list event kinds (header/item x regular/addressable).
    TagName: Tag names of the header and item tag schema.
    Coordinate: Parsed ``39998:<pubkey>:<d-tag>`` addressable reference with
        a canonical string form.
    ById, ByCoordinate, ParentRef: Tagged union of item parent references.
    HeaderSpec, ItemSpec, CustomField: Typed builder inputs.
    HeaderTagSet, ItemTagSet: Typed tag sets lowered to wire arrays by
        ``to_wire()``.
    ListFilter: Server-side filter plus client-side name/offset refinement.
    ListEvent: Immutable snapshot of a fetched event.

See Also:
    [wokhei.nips.event_builders][]: Builds tag sets from the specs.
    [wokhei.services][]: Resolver and query engine operating on these models.
"""

from .constants import (
    CLIENT_ID,
    DEFAULT_RELAY,
    HEADER_KINDS,
    ITEM_KINDS,
    ListKind,
    TagName,
)
from .coordinate import Coordinate, canonicalize, parse_coordinate
from .event import ListEvent
from .filter import ListFilter
from .specs import (
    ById,
    ByCoordinate,
    CustomField,
    HeaderSpec,
    ItemSpec,
    ParentRef,
    parse_parent_ref,
)
from .tags import HeaderTagSet, ItemTagSet, WireTags


__all__ = [
    "CLIENT_ID",
    "DEFAULT_RELAY",
    "HEADER_KINDS",
    "ITEM_KINDS",
    "ById",
    "ByCoordinate",
    "Coordinate",
    "CustomField",
    "HeaderSpec",
    "HeaderTagSet",
    "ItemSpec",
    "ItemTagSet",
    "ListEvent",
    "ListFilter",
    "ListKind",
    "ParentRef",
    "TagName",
    "WireTags",
    "canonicalize",
    "parse_coordinate",
    "parse_parent_ref",
]
