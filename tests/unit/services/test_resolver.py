"""
Unit tests for services.resolver module.

Tests:
- pointer_for_header() - z pointer of fetched header events
- resolve_parent() - coordinate mode (no I/O) and id mode (one fetch)
- resolve() - exactly-one-of raw input validation before any fetch
"""

import pytest

from wokhei.exceptions import (
    HeaderMissingDTag,
    HeaderNotFound,
    InvalidArgs,
    InvalidCoordinate,
    InvalidEventId,
    RelayUnreachable,
)
from wokhei.models import ByCoordinate, ById
from wokhei.services.resolver import pointer_for_header, resolve, resolve_parent


AUTHOR = "ab" * 32
COORD = f"39998:{AUTHOR}:jazz"


# =============================================================================
# pointer_for_header() Tests
# =============================================================================


class TestPointerForHeader:
    """pointer_for_header()."""

    def test_regular_header(self, header_factory) -> None:
        header = header_factory("song")
        assert pointer_for_header(header) == header.id

    def test_addressable_header(self, header_factory) -> None:
        header = header_factory("song", addressable=True, d_tag="jazz")
        assert pointer_for_header(header) == COORD

    def test_addressable_without_d(self, header_factory) -> None:
        with pytest.raises(HeaderMissingDTag):
            pointer_for_header(header_factory("song", addressable=True))

    @pytest.mark.parametrize("kind", [1, 9999, 39999, 30023])
    def test_not_a_header(self, event_factory, kind: int) -> None:
        with pytest.raises(HeaderNotFound, match=f"kind {kind}"):
            pointer_for_header(event_factory(kind=kind))


# =============================================================================
# resolve_parent() Tests
# =============================================================================


class TestResolveByCoordinate:
    """Coordinate mode never touches the relay."""

    async def test_no_network_access(self, fake_relay) -> None:
        z = await resolve_parent(ByCoordinate.parse(COORD), fake_relay)
        assert z == COORD
        assert fake_relay.fetch_calls == []
        assert fake_relay.fetch_by_id_calls == []

    async def test_canonicalizes(self, fake_relay) -> None:
        z = await resolve_parent(ByCoordinate.parse(f"39998:{AUTHOR.upper()}:jazz"), fake_relay)
        assert z == COORD

    async def test_works_with_failing_relay(self, fake_relay) -> None:
        fake_relay.fail_with = RelayUnreachable("ws://fake.relay")
        assert await resolve_parent(ByCoordinate.parse(COORD), fake_relay) == COORD


class TestResolveById:
    """Id mode fetches the header once."""

    async def test_regular_header(self, fake_relay_cls, header_factory) -> None:
        header = header_factory("song")
        relay = fake_relay_cls([header])
        assert await resolve_parent(ById(header.id), relay) == header.id
        assert relay.fetch_by_id_calls == [header.id]

    async def test_addressable_header_lowercases_author(
        self, fake_relay_cls, header_factory
    ) -> None:
        """Kind 39998 with d=abc resolves to the lowercased coordinate."""
        header = header_factory("song", addressable=True, d_tag="abc", author=AUTHOR.upper())
        relay = fake_relay_cls([header])
        assert await resolve_parent(ById(header.id), relay) == f"39998:{AUTHOR}:abc"

    async def test_missing(self, fake_relay) -> None:
        with pytest.raises(HeaderNotFound, match="no event returned"):
            await resolve_parent(ById("ef" * 32), fake_relay)

    async def test_not_a_header(self, fake_relay_cls, item_factory) -> None:
        item = item_factory("ef" * 32)
        relay = fake_relay_cls([item])
        with pytest.raises(HeaderNotFound):
            await resolve_parent(ById(item.id), relay)

    async def test_addressable_without_d(self, fake_relay_cls, header_factory) -> None:
        header = header_factory("song", addressable=True)
        with pytest.raises(HeaderMissingDTag):
            await resolve_parent(ById(header.id), fake_relay_cls([header]))

    async def test_transport_error_propagates(self, fake_relay) -> None:
        fake_relay.fail_with = RelayUnreachable("ws://fake.relay", "reset")
        with pytest.raises(RelayUnreachable) as exc_info:
            await resolve_parent(ById("ef" * 32), fake_relay)
        assert exc_info.value.retryable

    async def test_rejects_other_types(self, fake_relay) -> None:
        with pytest.raises(TypeError):
            await resolve_parent(COORD, fake_relay)  # type: ignore[arg-type]


# =============================================================================
# resolve() Tests
# =============================================================================


class TestResolve:
    """resolve() with raw user input."""

    async def test_both(self, fake_relay) -> None:
        with pytest.raises(InvalidArgs):
            await resolve(fake_relay, event_id="ef" * 32, coordinate=COORD)
        assert fake_relay.fetch_by_id_calls == []

    async def test_neither(self, fake_relay) -> None:
        with pytest.raises(InvalidArgs):
            await resolve(fake_relay)

    async def test_invalid_id_before_fetch(self, fake_relay) -> None:
        with pytest.raises(InvalidEventId):
            await resolve(fake_relay, event_id="deadbeef")
        assert fake_relay.fetch_by_id_calls == []

    async def test_invalid_coordinate(self, fake_relay) -> None:
        with pytest.raises(InvalidCoordinate):
            await resolve(fake_relay, coordinate="9998:deadbeef:x")

    async def test_coordinate(self, fake_relay) -> None:
        assert await resolve(fake_relay, coordinate=COORD) == COORD
