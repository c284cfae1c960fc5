"""Addressable event coordinates (``kind:pubkey:d-tag``).

A coordinate references an addressable event without knowing its id. In the
list protocol it is the parent pointer items carry when their header is
addressable, so the coordinate grammar accepted here is deliberately narrow:
only the addressable header kind (39998) is a valid coordinate subject.

Canonical form: ``"{kind}:{lowercase-hex-author}:{d_tag}"``. Parsing then
re-serializing is idempotent:

```python
coord = Coordinate.parse("39998:AB12...:jazz")
str(coord)                                   # "39998:ab12...:jazz"
Coordinate.parse(str(coord)) == coord        # True
```

See Also:
    [ParentRef][wokhei.models.specs.ParentRef]: Tagged union that carries
        a parsed coordinate for coordinate-mode parent references.
    [resolve_parent()][wokhei.services.resolver.resolve_parent]: Resolves a
        coordinate into a ``z`` pointer with zero network access.
"""

from __future__ import annotations

from dataclasses import dataclass

from wokhei.exceptions import InvalidCoordinate

from ._validation import is_hex_id, validate_str_no_null
from .constants import ListKind


_FIELD_COUNT = 3


@dataclass(frozen=True, slots=True)
class Coordinate:
    """Parsed, validated addressable header coordinate.

    Attributes:
        kind: Event kind of the referenced event (always 39998).
        author: Author public key as 64 lowercase hex characters.
        d_tag: Non-empty identity key of the referenced event. May contain
            ``:`` characters.

    Raises:
        InvalidCoordinate: If any field is invalid. Direct construction
            applies the same rules as
            [parse()][wokhei.models.coordinate.Coordinate.parse], except
            that the author must already be lowercase.
    """

    kind: int
    author: str
    d_tag: str

    def __post_init__(self) -> None:
        text = f"{self.kind}:{self.author}:{self.d_tag}"
        if self.kind != ListKind.ADDRESSABLE_HEADER:
            raise InvalidCoordinate(
                text, f"kind must be {int(ListKind.ADDRESSABLE_HEADER)}, got {self.kind}"
            )
        if not is_hex_id(self.author) or self.author != self.author.lower():
            raise InvalidCoordinate(text, "author must be a 64-character lowercase hex pubkey")
        try:
            validate_str_no_null(self.d_tag, "d_tag")
        except (TypeError, ValueError) as e:
            raise InvalidCoordinate(text, str(e)) from e
        if not self.d_tag:
            raise InvalidCoordinate(text, "d-tag must not be empty")

    @classmethod
    def parse(cls, value: str) -> Coordinate:
        """Parse a ``kind:pubkey:d-tag`` string.

        The string is split on the first two ``:`` only, so the d-tag keeps
        any ``:`` it contains. The author is accepted in either case and
        normalized to lowercase.

        Raises:
            InvalidCoordinate: If the field count is wrong, the kind is not a
                non-negative integer equal to 39998, the author is not 64 hex
                digits, or the d-tag is empty.
        """
        if not isinstance(value, str):
            raise InvalidCoordinate(repr(value), "coordinate must be a string")

        parts = value.split(":", _FIELD_COUNT - 1)
        if len(parts) != _FIELD_COUNT:
            raise InvalidCoordinate(value, "expected kind:pubkey:d-tag")

        kind_str, author, d_tag = parts
        if not kind_str.isascii() or not kind_str.isdigit():
            raise InvalidCoordinate(value, f"kind {kind_str!r} is not a non-negative integer")
        if not is_hex_id(author):
            raise InvalidCoordinate(value, "author must be a 64-character hex pubkey")

        return cls(kind=int(kind_str), author=author.lower(), d_tag=d_tag)

    @classmethod
    def for_event(cls, kind: int, author: str, d_tag: str) -> Coordinate:
        """Build the coordinate of a fetched addressable event."""
        if not is_hex_id(author):
            raise InvalidCoordinate(f"{kind}:{author}:{d_tag}", "author must be 64 hex digits")
        return cls(kind=kind, author=author.lower(), d_tag=d_tag)

    def canonicalize(self) -> str:
        """Return the canonical ``kind:author:d_tag`` string."""
        return f"{self.kind}:{self.author}:{self.d_tag}"

    def __str__(self) -> str:
        return self.canonicalize()


def parse_coordinate(value: str) -> Coordinate:
    """Module-level alias for [Coordinate.parse()][wokhei.models.coordinate.Coordinate.parse]."""
    return Coordinate.parse(value)


def canonicalize(value: Coordinate | str) -> str:
    """Return the canonical form of a coordinate or coordinate string."""
    coord = value if isinstance(value, Coordinate) else Coordinate.parse(value)
    return coord.canonicalize()
