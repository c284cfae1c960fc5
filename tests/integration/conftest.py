"""Integration test fixtures providing an ephemeral relay via testcontainers.

The relay container is session-scoped to avoid the container startup cost
per test. Every test publishes under a fresh random key, so tests stay
isolated without resetting the relay.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator

import pytest
from nostr_sdk import Keys
from testcontainers.core.container import DockerContainer
from testcontainers.core.waiting_utils import wait_for_logs

from wokhei.core.config import WokheiConfig
from wokhei.services.lists import ListService
from wokhei.utils.protocol import NostrRelayClient


RELAY_IMAGE = "scsibug/nostr-rs-relay:latest"
RELAY_PORT = 8080


# ---------------------------------------------------------------------------
# Session-scoped container
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def relay_container() -> Iterator[DockerContainer]:
    """Spawn an ephemeral nostr-rs-relay container for the test session."""
    try:
        container = DockerContainer(RELAY_IMAGE).with_exposed_ports(RELAY_PORT)
        container.start()
    except Exception as e:  # docker daemon missing or image unavailable
        pytest.skip(f"relay container unavailable: {e}")
    try:
        wait_for_logs(container, "listening on", timeout=60)
        yield container
    finally:
        container.stop()


@pytest.fixture(scope="session")
def relay_config(relay_container: DockerContainer) -> WokheiConfig:
    host = relay_container.get_container_host_ip()
    port = relay_container.get_exposed_port(RELAY_PORT)
    return WokheiConfig(relay=f"ws://{host}:{port}")


# ---------------------------------------------------------------------------
# Function-scoped session with a fresh key
# ---------------------------------------------------------------------------


@pytest.fixture
async def service(relay_config: WokheiConfig) -> AsyncIterator[ListService]:
    """ListService over a connected client signing with a fresh key."""
    async with NostrRelayClient.from_config(relay_config, keys=Keys.generate()) as relay:
        yield ListService(relay, relay_config)
