"""Abstract relay client interface.

The relay is the only I/O boundary of the list core. The resolver and the
query engine receive a [RelayClient][wokhei.core.relay_client.RelayClient]
as an injected capability, so they can be exercised against an in-memory
double that records calls and returns scripted events or errors.

Implementations own their connection lifecycle and translate transport
failures into [RelayUnreachable][wokhei.exceptions.RelayUnreachable] and
refusals into [RelayRejected][wokhei.exceptions.RelayRejected]. No retry
happens at this layer or above it.

See Also:
    [NostrRelayClient][wokhei.utils.protocol.NostrRelayClient]: The
        ``nostr-sdk`` implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Self


if TYPE_CHECKING:
    from types import TracebackType

    from wokhei.models.event import ListEvent
    from wokhei.models.filter import ListFilter
    from wokhei.nips.event_builders import EventDraft


@dataclass(frozen=True, slots=True)
class PublishResult:
    """Acknowledged publish: id of the signed event and its author."""

    event_id: str
    author: str


class RelayClient(ABC):
    """Capability object for one relay session.

    Usable as an async context manager:

    ```python
    async with NostrRelayClient(config, keys=keys) as relay:
        z = await resolve_parent(ref, relay)
    ```
    """

    @property
    @abstractmethod
    def url(self) -> str:
        """Relay URL this client talks to."""

    @abstractmethod
    async def connect(self) -> None:
        """Open the session.

        Raises:
            RelayUnreachable: If the relay cannot be reached.
        """

    @abstractmethod
    async def close(self) -> None:
        """Close the session. Idempotent."""

    @abstractmethod
    async def publish(self, draft: EventDraft) -> PublishResult:
        """Sign and publish *draft*.

        Raises:
            KeysNotFound: If the client has no signing key.
            RelayRejected: If the relay refused the event.
            RelayUnreachable: On transport failure.
        """

    @abstractmethod
    async def fetch(self, list_filter: ListFilter, *, limit: int | None = None) -> list[ListEvent]:
        """Return the events matching the server-side part of *list_filter*.

        Args:
            list_filter: Filter to evaluate. Client-side refinements (name
                substring, offset) are ignored here.
            limit: Overrides the filter's server limit for this request.

        Raises:
            RelayUnreachable: On transport failure.
        """

    @abstractmethod
    async def fetch_by_id(self, event_id: str) -> ListEvent | None:
        """Return the event with *event_id*, or None when the relay has none.

        Raises:
            RelayUnreachable: On transport failure.
        """

    async def count(self, list_filter: ListFilter) -> int | None:
        """Return the number of matching events, or None without server count support."""
        return None

    def public_key(self) -> str | None:
        """Hex public key of the signing key, or None for a read-only client."""
        return None

    async def __aenter__(self) -> Self:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
