"""Utilities layer: the ``nostr-sdk`` relay client and key loading.

Sits in the middle of the diamond DAG alongside
[wokhei.core][wokhei.core] and [wokhei.nips][wokhei.nips]. This is the only
layer that opens network connections.

Attributes:
    NostrRelayClient: [RelayClient][wokhei.core.relay_client.RelayClient]
        implementation over ``nostr_sdk.Client``.
    load_keys_from_env, load_optional_keys: Secret key loading from the
        environment.
"""

from .keys import load_keys_from_env, load_optional_keys
from .protocol import NostrRelayClient


__all__ = [
    "NostrRelayClient",
    "load_keys_from_env",
    "load_optional_keys",
]
