"""Services layer: parent resolution, queries and the list command surface.

Top of the diamond DAG. Depends on [wokhei.core][wokhei.core],
[wokhei.nips][wokhei.nips] and [wokhei.models][wokhei.models]; it only
talks to the network through an injected
[RelayClient][wokhei.core.relay_client.RelayClient].

Attributes:
    resolve_parent: Header reference to ``z`` pointer (zero or one fetch).
    QueryEngine: Enumeration, counting and export with client-side
        refinement and paging.
    ListService: One method per CLI command, returning JSON-ready dicts.
"""

from .lists import ListService
from .query import (
    DEFAULT_HEADER_LIMIT,
    DEFAULT_ITEM_LIMIT,
    ExportEntry,
    ExportResult,
    QueryCommand,
    QueryEngine,
    QueryParams,
    build_filter,
    event_to_dict,
    headers_filter,
    items_filter,
    refine,
    sort_events,
)
from .resolver import pointer_for_header, resolve, resolve_parent


__all__ = [
    "DEFAULT_HEADER_LIMIT",
    "DEFAULT_ITEM_LIMIT",
    "ExportEntry",
    "ExportResult",
    "ListService",
    "QueryCommand",
    "QueryEngine",
    "QueryParams",
    "build_filter",
    "event_to_dict",
    "headers_filter",
    "items_filter",
    "pointer_for_header",
    "refine",
    "resolve",
    "resolve_parent",
    "sort_events",
]
