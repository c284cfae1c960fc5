"""Relay client built on ``nostr-sdk``.

[NostrRelayClient][wokhei.utils.protocol.NostrRelayClient] implements the
[RelayClient][wokhei.core.relay_client.RelayClient] interface against a
single relay. It is the only place where ``nostr-sdk`` objects cross into
the I/O path and where SDK failures are translated:

* ``OSError``, ``TimeoutError`` and ``NostrSdkError`` during connect, fetch
  or publish become [RelayUnreachable][wokhei.exceptions.RelayUnreachable];
* a publish the relay answers with a failure becomes
  [RelayRejected][wokhei.exceptions.RelayRejected].

Fetched events are signature-verified before they are snapshotted into
[ListEvent][wokhei.models.event.ListEvent]; events that fail verification
are dropped.

Examples:
    ```python
    from wokhei.utils.protocol import NostrRelayClient

    async with NostrRelayClient("wss://relay.example.com", keys=keys) as relay:
        result = await relay.publish(draft)
    ```
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from nostr_sdk import ClientBuilder, EventId, Filter, NostrSdkError, NostrSigner, RelayUrl

from wokhei.core.config import TimeoutsConfig
from wokhei.core.relay_client import PublishResult, RelayClient
from wokhei.exceptions import InvalidEventId, KeysNotFound, RelayRejected, RelayUnreachable
from wokhei.models._validation import is_hex_id
from wokhei.models.event import ListEvent


if TYPE_CHECKING:
    from nostr_sdk import Client, Events, Keys

    from wokhei.core.config import WokheiConfig
    from wokhei.models.filter import ListFilter
    from wokhei.nips.event_builders import EventDraft


logger = logging.getLogger(__name__)

_TRANSPORT_ERRORS = (OSError, TimeoutError, NostrSdkError)


class NostrRelayClient(RelayClient):
    """Single-relay client with an optional signer.

    Args:
        url: Relay WebSocket URL.
        keys: Signing keys. Without keys the client is read-only and
            [publish()][wokhei.utils.protocol.NostrRelayClient.publish]
            raises [KeysNotFound][wokhei.exceptions.KeysNotFound].
        timeouts: Connect, fetch and publish timeouts.
    """

    def __init__(
        self,
        url: str,
        *,
        keys: Keys | None = None,
        timeouts: TimeoutsConfig | None = None,
    ) -> None:
        self._url = url
        self._keys = keys
        self._timeouts = timeouts or TimeoutsConfig()
        self._client: Client | None = None
        self._relay_url: RelayUrl | None = None

    @classmethod
    def from_config(cls, config: WokheiConfig, *, keys: Keys | None = None) -> NostrRelayClient:
        return cls(config.relay, keys=keys, timeouts=config.timeouts)

    @property
    def url(self) -> str:
        return self._url

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def public_key(self) -> str | None:
        if self._keys is None:
            return None
        return self._keys.public_key().to_hex()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def connect(self) -> None:
        """Connect to the relay.

        Idempotent. The SDK client is kept only when the relay accepted the
        connection within ``timeouts.connect``.

        Raises:
            RelayUnreachable: If the URL is invalid or the connection fails.
        """
        if self._client is not None:
            return

        try:
            relay_url = RelayUrl.parse(self._url)
        except NostrSdkError as e:
            raise RelayUnreachable(self._url, f"invalid relay URL: {e}") from e

        builder = ClientBuilder()
        if self._keys is not None:
            builder = builder.signer(NostrSigner.keys(self._keys))
        client = builder.build()

        logger.debug("relay_connecting relay=%s", self._url)
        try:
            await client.add_relay(relay_url)
            output = await client.try_connect(timedelta(seconds=self._timeouts.connect))
        except _TRANSPORT_ERRORS as e:
            raise RelayUnreachable(self._url, str(e)) from e

        if relay_url not in output.success:
            reason = output.failed.get(relay_url, "connection failed")
            with contextlib.suppress(Exception):
                await client.disconnect()
            logger.debug("relay_connect_failed relay=%s error=%s", self._url, reason)
            raise RelayUnreachable(self._url, str(reason))

        self._client = client
        self._relay_url = relay_url
        logger.debug("relay_connected relay=%s", self._url)

    async def close(self) -> None:
        if self._client is None:
            return
        client, self._client, self._relay_url = self._client, None, None
        # nostr-sdk Rust FFI can raise arbitrary exception types during shutdown.
        with contextlib.suppress(Exception):
            await client.shutdown()
        logger.debug("relay_closed relay=%s", self._url)

    def _require_client(self) -> Client:
        if self._client is None:
            raise RuntimeError("Relay client not connected. Call connect() first.")
        return self._client

    # -------------------------------------------------------------------------
    # Publish
    # -------------------------------------------------------------------------

    async def publish(self, draft: EventDraft) -> PublishResult:
        """Sign *draft* with the client keys and send it to the relay.

        Raises:
            KeysNotFound: If the client was built without keys.
            RelayRejected: If the relay answered with a failure, or did not
                acknowledge the event.
            RelayUnreachable: On transport failure or timeout.
        """
        if self._keys is None:
            raise KeysNotFound("No signing key loaded; publishing requires a secret key")
        client = self._require_client()

        try:
            output = await asyncio.wait_for(
                client.send_event_builder(draft.to_builder()),
                timeout=self._timeouts.publish,
            )
        except _TRANSPORT_ERRORS as e:
            raise RelayUnreachable(self._url, str(e)) from e

        if self._relay_url in output.failed:
            reason = output.failed.get(self._relay_url) or "unknown"
            logger.debug("publish_rejected relay=%s reason=%s", self._url, reason)
            raise RelayRejected(self._url, str(reason))
        if self._relay_url not in output.success:
            raise RelayRejected(self._url, "no acknowledgement from relay")

        event_id = output.id.to_hex()
        logger.debug("publish_accepted relay=%s id=%s kind=%s", self._url, event_id, draft.kind)
        return PublishResult(event_id=event_id, author=self._keys.public_key().to_hex())

    # -------------------------------------------------------------------------
    # Fetch
    # -------------------------------------------------------------------------

    async def _fetch_events(self, nostr_filter: Filter) -> list[ListEvent]:
        client = self._require_client()
        try:
            events: Events = await client.fetch_events(
                nostr_filter, timedelta(seconds=self._timeouts.fetch)
            )
        except _TRANSPORT_ERRORS as e:
            raise RelayUnreachable(self._url, str(e)) from e

        result: list[ListEvent] = []
        for evt in events.to_vec():
            try:
                if not evt.verify():
                    logger.debug("event_invalid_signature relay=%s", self._url)
                    continue
                result.append(ListEvent.from_nostr(evt))
            except (ValueError, TypeError, OverflowError) as e:
                logger.debug("event_parse_failed relay=%s error=%s", self._url, e)
        return result

    async def fetch(self, list_filter: ListFilter, *, limit: int | None = None) -> list[ListEvent]:
        events = await self._fetch_events(list_filter.to_nostr(limit=limit))
        logger.debug(
            "fetch_completed relay=%s kinds=%s events=%s",
            self._url,
            list_filter.kinds,
            len(events),
        )
        return events

    async def fetch_by_id(self, event_id: str) -> ListEvent | None:
        if not is_hex_id(event_id):
            raise InvalidEventId(event_id)
        nostr_filter = Filter().id(EventId.parse(event_id.lower())).limit(1)
        events = await self._fetch_events(nostr_filter)
        return events[0] if events else None
