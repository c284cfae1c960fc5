"""Immutable snapshot of a fetched Nostr event.

[ListEvent][wokhei.models.event.ListEvent] is the plain-data view of an
event the services layer works with. It is built from a
``nostr_sdk.Event`` by
[from_nostr()][wokhei.models.event.ListEvent.from_nostr] at the relay
boundary, or from a wire-shaped dict by
[from_dict()][wokhei.models.event.ListEvent.from_dict], so the resolver and
the query engine never touch SDK objects and can be tested with in-memory
events.

See Also:
    [RelayClient.fetch()][wokhei.core.relay_client.RelayClient.fetch]:
        Returns lists of this model.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ._validation import is_hex_id, validate_instance, validate_str_no_null
from .constants import ListKind, TagName
from .coordinate import Coordinate


if TYPE_CHECKING:
    from nostr_sdk import Event as NostrEvent


@dataclass(frozen=True, slots=True)
class ListEvent:
    """Immutable Nostr event with tag lookup helpers.

    Attributes:
        id: Event id, 64 lowercase hex characters.
        author: Author public key, 64 lowercase hex characters.
        created_at: Unix timestamp in seconds.
        kind: Integer event kind.
        tags: Tags as a tuple of string tuples (first element is the name).
        content: Raw content string.
        sig: Schnorr signature as hex (opaque here).

    Raises:
        TypeError: If a field has the wrong type.
        ValueError: If ``id``/``author`` are not 64-char hex, or
            ``created_at``/``kind`` are negative.
    """

    id: str
    author: str
    created_at: int
    kind: int
    tags: tuple[tuple[str, ...], ...] = ()
    content: str = ""
    sig: str = ""

    def __post_init__(self) -> None:
        for name in ("id", "author"):
            value = getattr(self, name)
            if not is_hex_id(value):
                raise ValueError(f"{name} must be 64 hex characters, got {value!r}")
            object.__setattr__(self, name, value.lower())
        for name in ("created_at", "kind"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an int, got {type(value).__name__}")
            if value < 0:
                raise ValueError(f"{name} must be non-negative")
        object.__setattr__(self, "tags", tuple(tuple(tag) for tag in self.tags))
        for tag in self.tags:
            for value in tag:
                validate_str_no_null(value, "tags")
        validate_instance(self.content, str, "content")

    # -------------------------------------------------------------------------
    # Tag helpers
    # -------------------------------------------------------------------------

    def find_tag(self, name: str) -> tuple[str, ...] | None:
        """Return the first tag named *name* (including the name), or None."""
        for tag in self.tags:
            if tag and tag[0] == name:
                return tag
        return None

    def first_value(self, name: str) -> str | None:
        """Return the first value of the first tag named *name*, or None."""
        tag = self.find_tag(name)
        if tag is None or len(tag) < 2:  # noqa: PLR2004
            return None
        return tag[1]

    def values(self, name: str) -> list[str]:
        """Return the first value of every tag named *name*, in order."""
        return [tag[1] for tag in self.tags if len(tag) >= 2 and tag[0] == name]  # noqa: PLR2004

    @property
    def d_tag(self) -> str | None:
        return self.first_value(TagName.IDENTIFIER)

    @property
    def name(self) -> str | None:
        """Singular name from the ``names`` tag (headers only)."""
        return self.first_value(TagName.NAMES)

    @property
    def is_header(self) -> bool:
        return self.kind in (ListKind.HEADER, ListKind.ADDRESSABLE_HEADER)

    @property
    def is_item(self) -> bool:
        return self.kind in (ListKind.ITEM, ListKind.ADDRESSABLE_ITEM)

    def coordinate(self) -> Coordinate | None:
        """Coordinate of an addressable header, or None when not applicable."""
        if self.kind != ListKind.ADDRESSABLE_HEADER or not self.d_tag:
            return None
        return Coordinate.for_event(self.kind, self.author, self.d_tag)

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Return the wire-shaped mapping (``pubkey`` naming as on the wire)."""
        return {
            "id": self.id,
            "pubkey": self.author,
            "created_at": self.created_at,
            "kind": self.kind,
            "tags": [list(tag) for tag in self.tags],
            "content": self.content,
            "sig": self.sig,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ListEvent:
        """Build from a wire-shaped mapping (``pubkey`` or ``author`` key)."""
        return cls(
            id=data["id"],
            author=data.get("pubkey", data.get("author", "")),
            created_at=data["created_at"],
            kind=data["kind"],
            tags=tuple(tuple(tag) for tag in data.get("tags", ())),
            content=data.get("content", ""),
            sig=data.get("sig", ""),
        )

    @classmethod
    def from_nostr(cls, event: NostrEvent) -> ListEvent:
        """Snapshot a ``nostr_sdk.Event``."""
        return cls(
            id=event.id().to_hex(),
            author=event.author().to_hex(),
            created_at=event.created_at().as_secs(),
            kind=event.kind().as_u16(),
            tags=tuple(tuple(tag.as_vec()) for tag in event.tags().to_vec()),
            content=event.content(),
            sig=str(event.signature()),
        )
