"""
Pytest configuration and shared fixtures for Wokhei tests.

Provides:
- ``FakeRelayClient``: in-memory relay that evaluates filters, records
  every call and can be scripted to fail
- Event factories for list headers and items
- Custom pytest markers for test categorization
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Callable, Iterable
from typing import Any

import pytest

from wokhei.core.relay_client import PublishResult, RelayClient
from wokhei.exceptions import KeysNotFound
from wokhei.models import ListEvent, ListFilter, ListKind


# ============================================================================
# Constants
# ============================================================================

AUTHOR = "ab" * 32
OTHER_AUTHOR = "cd" * 32
BASE_TS = 1_700_000_000


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


# ============================================================================
# Fake relay client
# ============================================================================


def _matches(event: ListEvent, list_filter: ListFilter) -> bool:
    if event.kind not in list_filter.kinds:
        return False
    if list_filter.author is not None and event.author != list_filter.author:
        return False
    if list_filter.since is not None and event.created_at < list_filter.since:
        return False
    if list_filter.until is not None and event.created_at > list_filter.until:
        return False
    return all(value in event.values(letter) for letter, value in list_filter.tags.items())


class FakeRelayClient(RelayClient):
    """In-memory relay: evaluates filters over ``events`` and records calls.

    Fetches return matches newest first, truncated to the request limit and
    to ``page_cap`` (the relay's own per-request cap) when set.
    """

    def __init__(
        self,
        events: Iterable[ListEvent] = (),
        *,
        author: str | None = AUTHOR,
        page_cap: int | None = None,
        server_count: bool = False,
    ) -> None:
        self.events: list[ListEvent] = list(events)
        self.author = author
        self.page_cap = page_cap
        self.server_count = server_count
        self.fetch_calls: list[tuple[ListFilter, int | None]] = []
        self.fetch_by_id_calls: list[str] = []
        self.count_calls: list[ListFilter] = []
        self.published: list[Any] = []
        self.fail_with: BaseException | None = None
        self.fail_on_z: dict[str, BaseException] = {}
        self.connected = False
        self.closed = False

    @property
    def url(self) -> str:
        return "ws://fake.relay"

    async def connect(self) -> None:
        self.connected = True

    async def close(self) -> None:
        self.closed = True

    def public_key(self) -> str | None:
        return self.author

    async def publish(self, draft: Any) -> PublishResult:
        if self.author is None:
            raise KeysNotFound("No signing key loaded")
        self.published.append(draft)
        payload = json.dumps([len(self.published), draft.kind, draft.tags, draft.content])
        return PublishResult(
            event_id=hashlib.sha256(payload.encode()).hexdigest(), author=self.author
        )

    async def fetch(self, list_filter: ListFilter, *, limit: int | None = None) -> list[ListEvent]:
        self.fetch_calls.append((list_filter, limit))
        if self.fail_with is not None:
            raise self.fail_with
        for z, error in self.fail_on_z.items():
            if list_filter.tags.get("z") == z:
                raise error
        matched = sorted(
            (e for e in self.events if _matches(e, list_filter)),
            key=lambda e: (-e.created_at, e.id),
        )
        effective = limit if limit is not None else list_filter.server_limit
        if self.page_cap is not None:
            effective = self.page_cap if effective is None else min(effective, self.page_cap)
        return matched if effective is None else matched[:effective]

    async def fetch_by_id(self, event_id: str) -> ListEvent | None:
        self.fetch_by_id_calls.append(event_id)
        if self.fail_with is not None:
            raise self.fail_with
        return next((e for e in self.events if e.id == event_id), None)

    async def count(self, list_filter: ListFilter) -> int | None:
        self.count_calls.append(list_filter)
        if not self.server_count:
            return None
        return sum(1 for e in self.events if _matches(e, list_filter))


# ============================================================================
# Event factories
# ============================================================================


def make_event(
    *,
    kind: int,
    tags: Iterable[Iterable[str]] = (),
    created_at: int = BASE_TS,
    author: str = AUTHOR,
    content: str = "",
    seed: str = "",
) -> ListEvent:
    """Build a ListEvent with a deterministic id derived from its fields."""
    tag_tuple = tuple(tuple(t) for t in tags)
    preimage = json.dumps([kind, [list(t) for t in tag_tuple], created_at, author, content, seed])
    return ListEvent(
        id=hashlib.sha256(preimage.encode()).hexdigest(),
        author=author,
        created_at=created_at,
        kind=kind,
        tags=tag_tuple,
        content=content,
        sig="00" * 64,
    )


def make_header(
    name: str,
    *,
    addressable: bool = False,
    d_tag: str | None = None,
    topics: Iterable[str] = (),
    created_at: int = BASE_TS,
    author: str = AUTHOR,
) -> ListEvent:
    tags: list[list[str]] = [["names", name, name]]
    tags.extend(["t", t] for t in topics)
    if d_tag is not None:
        tags.append(["d", d_tag])
    tags.append(["client", "wokhei"])
    return make_event(
        kind=ListKind.header(addressable=addressable),
        tags=tags,
        created_at=created_at,
        author=author,
    )


def make_item(
    z: str,
    *,
    resource: str | None = None,
    created_at: int = BASE_TS,
    author: str = AUTHOR,
    addressable: bool = False,
    d_tag: str | None = None,
) -> ListEvent:
    tags: list[list[str]] = [["z", z]]
    if resource is not None:
        tags.append(["r", resource])
    if d_tag is not None:
        tags.append(["d", d_tag])
    return make_event(
        kind=ListKind.item(addressable=addressable),
        tags=tags,
        created_at=created_at,
        author=author,
    )


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def author() -> str:
    return AUTHOR


@pytest.fixture
def fake_relay() -> FakeRelayClient:
    """Empty fake relay with a signing key."""
    return FakeRelayClient()


@pytest.fixture
def fake_relay_cls() -> type[FakeRelayClient]:
    return FakeRelayClient


@pytest.fixture
def event_factory() -> Callable[..., ListEvent]:
    return make_event


@pytest.fixture
def header_factory() -> Callable[..., ListEvent]:
    return make_header


@pytest.fixture
def item_factory() -> Callable[..., ListEvent]:
    return make_item


# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests that need a running relay")
    config.addinivalue_line("markers", "unit: marks tests as unit tests (no external dependencies)")
    config.addinivalue_line("markers", "slow: marks tests as slow running")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on location."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
