"""Shared constants for the models layer.

Defines the DCoSL list event kinds, the tag names of the list tag schema,
and the fixed-length identifiers used across the models, nips, and services
layers. Placing them here avoids circular dependencies between the layers.

See Also:
    [wokhei.models.coordinate][]: Uses
        [ListKind][wokhei.models.constants.ListKind] to restrict coordinate
        subjects to the addressable header kind.
    [wokhei.nips.event_builders][]: Emits tags named by
        [TagName][wokhei.models.constants.TagName].
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class ListKind(IntEnum):
    """Event kinds of the Decentralized List (DCoSL) protocol.

    Two independent axes: header vs. item, and regular vs. addressable.
    Regular events are identified by their content-derived id; addressable
    events are identified by ``(kind, author, d-tag)`` and a later publish
    with the same triple supersedes the earlier one on conforming relays.

    Attributes:
        HEADER: Kind 9998 -- regular list header.
        ITEM: Kind 9999 -- regular list item.
        ADDRESSABLE_HEADER: Kind 39998 -- addressable list header.
        ADDRESSABLE_ITEM: Kind 39999 -- addressable list item.

    Examples:
        ```python
        ListKind.header(addressable=True)   # ListKind.ADDRESSABLE_HEADER
        ListKind.ITEM.is_addressable        # False
        ```
    """

    HEADER = 9_998
    ITEM = 9_999
    ADDRESSABLE_HEADER = 39_998
    ADDRESSABLE_ITEM = 39_999

    @classmethod
    def header(cls, *, addressable: bool) -> ListKind:
        """Return the header kind for the given addressability."""
        return cls.ADDRESSABLE_HEADER if addressable else cls.HEADER

    @classmethod
    def item(cls, *, addressable: bool) -> ListKind:
        """Return the item kind for the given addressability."""
        return cls.ADDRESSABLE_ITEM if addressable else cls.ITEM

    @property
    def is_addressable(self) -> bool:
        return self in (ListKind.ADDRESSABLE_HEADER, ListKind.ADDRESSABLE_ITEM)

    @property
    def is_header(self) -> bool:
        return self in (ListKind.HEADER, ListKind.ADDRESSABLE_HEADER)


HEADER_KINDS: tuple[ListKind, ...] = (ListKind.HEADER, ListKind.ADDRESSABLE_HEADER)
ITEM_KINDS: tuple[ListKind, ...] = (ListKind.ITEM, ListKind.ADDRESSABLE_ITEM)


class TagName(StrEnum):
    """Tag names of the list header and list item tag schema.

    Attributes:
        NAMES: Header singular and plural names (required).
        TITLES: Header singular and plural display titles.
        DESCRIPTION: Free-form header description.
        REQUIRED: One item field every item of the list must carry.
        RECOMMENDED: One item field items of the list should carry.
        TOPIC: Topic hashtag (``t``), repeatable.
        ALT: NIP-31 human-readable summary.
        IDENTIFIER: Addressable identity key (``d``).
        CLIENT: Publishing client identifier, always last on headers.
        PARENT: Item-to-header pointer (``z``), always first on items.
        RESOURCE: Item resource value (``r``).
        EVENT: Event reference (``e``), used by NIP-09 deletion requests.
    """

    NAMES = "names"
    TITLES = "titles"
    DESCRIPTION = "description"
    REQUIRED = "required"
    RECOMMENDED = "recommended"
    TOPIC = "t"
    ALT = "alt"
    IDENTIFIER = "d"
    CLIENT = "client"
    PARENT = "z"
    RESOURCE = "r"
    EVENT = "e"


# Tags an item custom field may never override: linkage and identity are
# derived, not user-supplied.
RESERVED_ITEM_FIELDS: frozenset[str] = frozenset({TagName.PARENT, TagName.IDENTIFIER})

DELETION_KIND = 5

HEX_ID_LENGTH = 64
CLIENT_ID = "wokhei"
DEFAULT_RELAY = "ws://localhost:7777"
