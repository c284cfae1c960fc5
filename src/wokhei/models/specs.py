"""Typed inputs for list header and list item construction.

[HeaderSpec][wokhei.models.specs.HeaderSpec] and
[ItemSpec][wokhei.models.specs.ItemSpec] describe *what* a user wants to
publish; the tag builders in
[wokhei.nips.event_builders][wokhei.nips.event_builders] turn them into the
protocol tag sets and enforce the required-field rules.

The parent reference of an item is a tagged union,
[ParentRef][wokhei.models.specs.ParentRef] = ``ById | ByCoordinate``, so an
item can never carry both or neither reference. Use
[parse_parent_ref()][wokhei.models.specs.parse_parent_ref] at the boundary
where the two optional user inputs arrive.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple, TypeAlias

from wokhei.exceptions import InvalidArgs, InvalidEventId

from ._validation import is_hex_id, validate_instance, validate_str_no_null, validate_str_tuple
from .constants import RESERVED_ITEM_FIELDS
from .coordinate import Coordinate


# =============================================================================
# Parent references
# =============================================================================


@dataclass(frozen=True, slots=True)
class ById:
    """Parent reference by header event id.

    Resolving it requires one fetch: the id alone does not say whether the
    header is regular or addressable.

    Raises:
        InvalidEventId: If ``event_id`` is not 64 hex characters.
    """

    event_id: str

    def __post_init__(self) -> None:
        if not is_hex_id(self.event_id):
            raise InvalidEventId(str(self.event_id))
        object.__setattr__(self, "event_id", self.event_id.lower())


@dataclass(frozen=True, slots=True)
class ByCoordinate:
    """Parent reference by addressable header coordinate (self-describing)."""

    coordinate: Coordinate

    def __post_init__(self) -> None:
        validate_instance(self.coordinate, Coordinate, "coordinate")

    @classmethod
    def parse(cls, value: str) -> ByCoordinate:
        return cls(Coordinate.parse(value))


ParentRef: TypeAlias = ById | ByCoordinate


def parse_parent_ref(*, event_id: str | None = None, coordinate: str | None = None) -> ParentRef:
    """Build a [ParentRef][wokhei.models.specs.ParentRef] from exactly one input.

    Args:
        event_id: Header event id (64 hex characters).
        coordinate: Header coordinate string ``39998:<pubkey>:<d-tag>``.

    Raises:
        InvalidArgs: If both or neither input is given.
        InvalidEventId: If ``event_id`` is malformed.
        InvalidCoordinate: If ``coordinate`` is malformed.
    """
    if event_id is not None and coordinate is not None:
        raise InvalidArgs(
            "Specify either a header event id or a header coordinate, not both",
            fix="Use --header=<event-id> or --header-coordinate=<39998:pubkey:d-tag>",
        )
    if event_id is None and coordinate is None:
        raise InvalidArgs(
            "A header event id or a header coordinate is required",
            fix="Use --header=<event-id> or --header-coordinate=<39998:pubkey:d-tag>",
        )
    if coordinate is not None:
        return ByCoordinate.parse(coordinate)
    return ById(event_id)  # type: ignore[arg-type]  # narrowed above


# =============================================================================
# Custom item fields
# =============================================================================


class CustomField(NamedTuple):
    """One ``key=value`` item field, emitted as its own ``[key, value]`` tag."""

    key: str
    value: str

    @classmethod
    def parse(cls, raw: str) -> CustomField:
        """Parse ``key=value``, splitting on the first ``=``.

        Raises:
            InvalidArgs: If there is no ``=``, the key is empty, or the key
                names a reserved linkage/identity tag (``z``, ``d``).
        """
        key, sep, value = raw.partition("=")
        key = key.strip()
        if not sep or not key:
            raise InvalidArgs(
                f"Invalid field {raw!r}: expected key=value",
                fix="Use --field=key=value (repeatable)",
            )
        field_ = cls(key, value)
        field_.check_not_reserved()
        return field_

    def check_not_reserved(self) -> None:
        if self.key in RESERVED_ITEM_FIELDS:
            raise InvalidArgs(
                f"Field {self.key!r} cannot be set explicitly",
                fix="The z tag is derived from --header or --header-coordinate; "
                "use --d-tag for the item identifier",
            )


# =============================================================================
# Specs
# =============================================================================


@dataclass(frozen=True, slots=True)
class HeaderSpec:
    """Everything needed to build a list header tag set.

    Semantic rules (non-empty name, d-tag iff addressable) are enforced by
    [build_header_tags()][wokhei.nips.event_builders.build_header_tags], not
    here, so a spec can be assembled incrementally from user input.

    Attributes:
        name: Singular list name (required).
        plural: Plural list name; the singular is repeated when absent.
        titles: Optional ``(singular, plural)`` display titles.
        description: Optional free-form description.
        required: Item fields every item must carry, in order.
        recommended: Item fields items should carry, in order.
        topics: Topic hashtags, in order.
        alt: Optional human-readable summary (a default is generated).
        addressable: Publish as kind 39998 instead of 9998.
        d_tag: Identity key, required iff ``addressable``.
        content: Event content (usually empty).
    """

    name: str
    plural: str | None = None
    titles: tuple[str, str] | None = None
    description: str | None = None
    required: tuple[str, ...] = ()
    recommended: tuple[str, ...] = ()
    topics: tuple[str, ...] = ()
    alt: str | None = None
    addressable: bool = False
    d_tag: str | None = None
    content: str = ""

    def __post_init__(self) -> None:
        validate_str_no_null(self.name, "name")
        for name in ("required", "recommended", "topics"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
            validate_str_tuple(getattr(self, name), name)
        if self.titles is not None:
            object.__setattr__(self, "titles", tuple(self.titles))
            validate_str_tuple(self.titles, "titles")
            if len(self.titles) != 2:  # noqa: PLR2004
                raise InvalidArgs(
                    "titles requires exactly two values (singular, plural)",
                    fix="Use --titles=<singular,plural>",
                )
        validate_str_no_null(self.content, "content")


@dataclass(frozen=True, slots=True)
class ItemSpec:
    """Everything needed to build a list item tag set.

    Attributes:
        parent: Reference to the header this item belongs to.
        resource: Optional resource value emitted as ``r``.
        content: Event content, defaults to the empty string.
        fields: Custom ``key=value`` fields, in order. Keys may repeat.
        addressable: Publish as kind 39999 instead of 9999.
        d_tag: Identity key, required iff ``addressable``.
    """

    parent: ParentRef
    resource: str | None = None
    content: str = ""
    fields: tuple[CustomField, ...] = field(default=())
    addressable: bool = False
    d_tag: str | None = None

    def __post_init__(self) -> None:
        validate_instance(self.parent, (ById, ByCoordinate), "parent")
        object.__setattr__(
            self, "fields", tuple(CustomField(*f) for f in self.fields)
        )
        validate_str_no_null(self.content, "content")
        if self.resource is not None:
            validate_str_no_null(self.resource, "resource")
