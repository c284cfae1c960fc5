"""Query filters for list header and item enumeration.

A [ListFilter][wokhei.models.filter.ListFilter] combines the part of a
query the relay can evaluate (kinds, author, single-letter tag constraints,
time bounds, limit) with the two refinements it cannot: a case-sensitive
substring match on the header name and a zero-based offset. The
server-side part is lowered to a ``nostr_sdk.Filter`` by
[to_nostr()][wokhei.models.filter.ListFilter.to_nostr]; the client-side
part is applied by
[refine()][wokhei.services.query.refine].
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from nostr_sdk import Alphabet, Filter, Kind, PublicKey, SingleLetterTag, Timestamp

from wokhei.exceptions import InvalidArgs

from ._validation import is_hex_id
from .constants import TagName


@dataclass(frozen=True, slots=True)
class ListFilter:
    """Server-side filter plus client-side refinements.

    Attributes:
        kinds: Event kinds to match.
        author: Optional author pubkey (64 hex characters).
        tags: Single-letter tag constraints, e.g. ``{"z": <pointer>}``.
        limit: Maximum number of refined results (None = unbounded).
        since: Optional inclusive lower ``created_at`` bound.
        until: Optional inclusive upper ``created_at`` bound.
        name_substring: Client-side, case-sensitive match on the singular
            name of the ``names`` tag.
        offset: Client-side number of matches dropped before the limit.

    Raises:
        InvalidArgs: On a malformed author, a non-positive limit, a negative
            offset, or a tag key that is not a single ASCII letter.
    """

    kinds: tuple[int, ...]
    author: str | None = None
    tags: Mapping[str, str] = field(default_factory=dict)
    limit: int | None = None
    since: int | None = None
    until: int | None = None
    name_substring: str | None = None
    offset: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "kinds", tuple(int(k) for k in self.kinds))
        if self.author is not None:
            if not is_hex_id(self.author):
                raise InvalidArgs(
                    f"Invalid author {self.author!r}: expected a 64-character hex pubkey",
                    fix="Use --author=<hex pubkey>",
                )
            object.__setattr__(self, "author", self.author.lower())
        for letter in self.tags:
            if len(letter) != 1 or not letter.isascii() or not letter.isalpha():
                raise InvalidArgs(f"Tag filter key must be a single letter, got {letter!r}")
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))
        if self.limit is not None and (isinstance(self.limit, bool) or self.limit < 1):
            raise InvalidArgs(f"limit must be a positive integer, got {self.limit}")
        if self.offset < 0:
            raise InvalidArgs(f"offset must be zero or positive, got {self.offset}")

    @property
    def has_client_refinement(self) -> bool:
        return self.name_substring is not None or self.offset > 0

    @property
    def server_limit(self) -> int | None:
        """Number of events to request from the relay.

        With a name filter the relay cannot pre-limit (it has no substring
        match), so everything is fetched and refined locally.
        """
        if self.limit is None or self.name_substring is not None:
            return None
        return self.offset + self.limit

    def page(self, *, until: int | None, limit: int) -> ListFilter:
        """Return a copy bounded to one page of at most *limit* events."""
        return replace(self, until=until, limit=limit, name_substring=None, offset=0)

    def to_nostr(self, *, limit: int | None = None) -> Filter:
        """Lower the server-side part to a ``nostr_sdk.Filter``.

        Args:
            limit: Overrides [server_limit][wokhei.models.filter.ListFilter.server_limit].
        """
        f = Filter().kinds([Kind(k) for k in self.kinds])
        if self.author is not None:
            f = f.author(PublicKey.parse(self.author))
        for letter, value in self.tags.items():
            if letter == TagName.TOPIC:
                f = f.hashtag(value)
            else:
                tag = SingleLetterTag.lowercase(getattr(Alphabet, letter.upper()))
                f = f.custom_tag(tag, value)
        if self.since is not None:
            f = f.since(Timestamp.from_secs(self.since))
        if self.until is not None:
            f = f.until(Timestamp.from_secs(self.until))
        effective = limit if limit is not None else self.server_limit
        if effective is not None:
            f = f.limit(effective)
        return f
