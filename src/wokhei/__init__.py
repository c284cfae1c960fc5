r"""Wokhei -- Decentralized List (DCoSL) client core for Nostr.

Publishes list headers and list items, links items to their header through
the ``z`` tag, and enumerates, counts and exports lists from a relay.

Architecture follows a **diamond DAG** dependency structure where imports
flow strictly downward:

```text
              services         Resolver, query engine, list commands
             /   |   \
          core  nips  utils    Logging/config/relay interface, tag
             \   |   /         builders, nostr-sdk relay client
              models           Pure frozen dataclasses (zero I/O)
```

Attributes:
    models: Coordinates, specs, typed tag sets, filters, event snapshots.
    core: Structured logging, YAML/pydantic configuration, the abstract
        relay client.
    nips: DCoSL header/item tag builders, NIP-09 deletion, d-tag derivation.
    utils: ``nostr-sdk`` relay client, key loading.
    services: Parent resolver, query engine, list command surface.

Note:
    Top-level imports (``from wokhei import ListService``) use lazy loading
    and resolve on first access.
"""

import importlib
from importlib.metadata import version as _get_version


__version__ = _get_version("wokhei")

__all__ = [
    "ById",
    "ByCoordinate",
    "Coordinate",
    "HeaderSpec",
    "ItemSpec",
    "ListEvent",
    "ListKind",
    "ListService",
    "Logger",
    "NostrRelayClient",
    "QueryEngine",
    "QueryParams",
    "RelayClient",
    "WokheiConfig",
    "WokheiError",
    "build_header_tags",
    "build_item_tags",
    "resolve_parent",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "WokheiError": ("wokhei.exceptions", "WokheiError"),
    "ById": ("wokhei.models", "ById"),
    "ByCoordinate": ("wokhei.models", "ByCoordinate"),
    "Coordinate": ("wokhei.models", "Coordinate"),
    "HeaderSpec": ("wokhei.models", "HeaderSpec"),
    "ItemSpec": ("wokhei.models", "ItemSpec"),
    "ListEvent": ("wokhei.models", "ListEvent"),
    "ListKind": ("wokhei.models", "ListKind"),
    "Logger": ("wokhei.core", "Logger"),
    "RelayClient": ("wokhei.core", "RelayClient"),
    "WokheiConfig": ("wokhei.core", "WokheiConfig"),
    "build_header_tags": ("wokhei.nips", "build_header_tags"),
    "build_item_tags": ("wokhei.nips", "build_item_tags"),
    "NostrRelayClient": ("wokhei.utils", "NostrRelayClient"),
    "ListService": ("wokhei.services", "ListService"),
    "QueryEngine": ("wokhei.services", "QueryEngine"),
    "QueryParams": ("wokhei.services", "QueryParams"),
    "resolve_parent": ("wokhei.services", "resolve_parent"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        globals()[name] = value  # Cache for subsequent access
        return value
    raise AttributeError(f"module 'wokhei' has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__
