"""Query engine: enumerate, count and export list headers and items.

Every enumeration is a server-side [ListFilter][wokhei.models.filter.ListFilter]
followed by a client-side refinement applied in this fixed order:

1. name substring (case-sensitive, on the singular value of ``names``);
2. offset: drop the first N matches;
3. limit: keep at most N of the rest.

Results are returned in a stable order: newest ``created_at`` first, ties
broken by event id ascending. Relays return events in arbitrary order and
truncate at their own page cap, so without a name filter the engine asks
the relay for ``offset + limit`` events and refines locally. With a name
filter the relay cannot pre-limit, so every match is fetched page by page
until the relay is exhausted.

An empty refined result is returned as an empty list: the engine does not
distinguish an empty topic from a page past the end.
[ListService][wokhei.services.lists.ListService] turns either case into
[NoResults][wokhei.exceptions.NoResults].

See Also:
    [resolve_parent()][wokhei.services.resolver.resolve_parent]: Produces the
        ``z`` pointer used by ``list-items``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from wokhei.core.config import QueryConfig
from wokhei.core.logger import Logger
from wokhei.exceptions import HeaderMissingDTag, HeaderNotFound, InvalidArgs
from wokhei.models.constants import HEADER_KINDS, ITEM_KINDS, TagName
from wokhei.models.filter import ListFilter
from wokhei.models.specs import ById
from wokhei.nips.event_builders import validate_z_pointer

from .resolver import pointer_for_header


if TYPE_CHECKING:
    from collections.abc import Iterable

    from wokhei.core.relay_client import RelayClient
    from wokhei.models.event import ListEvent


DEFAULT_HEADER_LIMIT = 50
DEFAULT_ITEM_LIMIT = 100


# =============================================================================
# Filters
# =============================================================================


class QueryCommand(StrEnum):
    """Enumeration commands served by the query engine."""

    LIST_HEADERS = "list-headers"
    LIST_ITEMS = "list-items"
    COUNT = "count"
    EXPORT = "export"


@dataclass(frozen=True, slots=True)
class QueryParams:
    """User-level query parameters shared by all commands.

    Attributes:
        author: Only events by this pubkey.
        topic: Only headers carrying this ``t`` tag.
        z: Resolved parent pointer (required by ``list-items``).
        name: Case-sensitive substring of the header's singular name.
        limit: Maximum number of results (per-command default when None).
        offset: Number of matches skipped before the limit applies.
        since: Inclusive lower ``created_at`` bound.
        until: Inclusive upper ``created_at`` bound.
    """

    author: str | None = None
    topic: str | None = None
    z: str | None = None
    name: str | None = None
    limit: int | None = None
    offset: int = 0
    since: int | None = None
    until: int | None = None


def headers_filter(
    *,
    author: str | None = None,
    topic: str | None = None,
    name: str | None = None,
    limit: int | None = DEFAULT_HEADER_LIMIT,
    offset: int = 0,
    since: int | None = None,
    until: int | None = None,
) -> ListFilter:
    """Filter for list headers (kinds 9998 and 39998)."""
    return ListFilter(
        kinds=HEADER_KINDS,
        author=author,
        tags={TagName.TOPIC.value: topic} if topic else {},
        limit=limit,
        since=since,
        until=until,
        name_substring=name,
        offset=offset,
    )


def items_filter(
    z: str,
    *,
    author: str | None = None,
    limit: int | None = DEFAULT_ITEM_LIMIT,
    offset: int = 0,
    since: int | None = None,
    until: int | None = None,
) -> ListFilter:
    """Filter for the items (kinds 9999 and 39999) linked to *z*.

    Raises:
        InvalidArgs: If *z* is neither an event id nor a canonical coordinate.
    """
    validate_z_pointer(z)
    return ListFilter(
        kinds=ITEM_KINDS,
        author=author,
        tags={TagName.PARENT.value: z},
        limit=limit,
        since=since,
        until=until,
        offset=offset,
    )


def build_filter(command: QueryCommand | str, params: QueryParams) -> ListFilter:
    """Map an enumeration command and its parameters to a filter.

    ``list-headers`` defaults to 50 results and ``list-items`` to 100.
    ``count`` and ``export`` are unbounded. For ``count`` the item kinds
    are selected when ``params.z`` is set, the header kinds otherwise.

    Raises:
        InvalidArgs: If ``list-items`` is requested without ``z``, or the
            command is unknown.
    """
    try:
        command = QueryCommand(command)
    except ValueError as e:
        raise InvalidArgs(f"Unknown query command: {command!r}") from e
    bounds: dict[str, Any] = {"since": params.since, "until": params.until}

    if command == QueryCommand.LIST_HEADERS:
        return headers_filter(
            author=params.author,
            topic=params.topic,
            name=params.name,
            limit=DEFAULT_HEADER_LIMIT if params.limit is None else params.limit,
            offset=params.offset,
            **bounds,
        )
    if command == QueryCommand.LIST_ITEMS:
        if not params.z:
            raise InvalidArgs("list-items requires a resolved header pointer")
        return items_filter(
            params.z,
            author=params.author,
            limit=DEFAULT_ITEM_LIMIT if params.limit is None else params.limit,
            offset=params.offset,
            **bounds,
        )
    if command == QueryCommand.COUNT:
        if params.z:
            return items_filter(params.z, author=params.author, limit=None, **bounds)
        return headers_filter(author=params.author, topic=params.topic, limit=None, **bounds)
    # export
    return headers_filter(author=params.author, topic=params.topic, limit=None, **bounds)


# =============================================================================
# Ordering and refinement
# =============================================================================


def sort_events(events: Iterable[ListEvent]) -> list[ListEvent]:
    """Return *events* newest first, ties by id ascending."""
    return sorted(events, key=lambda e: (-e.created_at, e.id))


def refine(events: Iterable[ListEvent], list_filter: ListFilter) -> list[ListEvent]:
    """Apply name substring, offset and limit, in that order, to sorted *events*."""
    result = sort_events(events)
    if list_filter.name_substring is not None:
        needle = list_filter.name_substring
        result = [e for e in result if e.name is not None and needle in e.name]
    result = result[list_filter.offset :]
    if list_filter.limit is not None:
        result = result[: list_filter.limit]
    return result


# =============================================================================
# Rendering
# =============================================================================


def event_to_dict(event: ListEvent) -> dict[str, Any]:
    """Render an event as a JSON-ready dict with convenience fields.

    Besides the wire fields (``id`` is rendered as ``event_id``), extracts
    ``name``/``plural`` from ``names``, ``titles``, ``description``, ``z``
    for items and ``coordinate`` for addressable headers.
    """
    data: dict[str, Any] = {
        "event_id": event.id,
        "kind": event.kind,
        "pubkey": event.author,
        "created_at": event.created_at,
        "tags": [list(tag) for tag in event.tags],
        "content": event.content,
        "sig": event.sig,
    }
    names = event.find_tag(TagName.NAMES)
    if names is not None and len(names) > 1:
        data["name"] = names[1]
        if len(names) > 2:  # noqa: PLR2004
            data["plural"] = names[2]
    titles = event.find_tag(TagName.TITLES)
    if titles is not None and len(titles) > 1:
        data["titles"] = list(titles[1:])
    description = event.first_value(TagName.DESCRIPTION)
    if description is not None:
        data["description"] = description
    if event.is_item:
        z = event.first_value(TagName.PARENT)
        if z is not None:
            data["z"] = z
    coordinate = event.coordinate()
    if coordinate is not None:
        data["coordinate"] = coordinate.canonicalize()
    return data


@dataclass(frozen=True, slots=True)
class ExportEntry:
    """One exported header, its ``z`` pointer and all of its items."""

    header: ListEvent
    z: str
    items: list[ListEvent] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "header": event_to_dict(self.header),
            "z": self.z,
            "item_count": len(self.items),
            "items": [event_to_dict(item) for item in self.items],
        }


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Headers paired with their materialized item lists, in header order."""

    headers: list[ExportEntry] = field(default_factory=list)

    @property
    def item_count(self) -> int:
        return sum(len(entry.items) for entry in self.headers)

    def to_dict(self) -> dict[str, Any]:
        return {
            "header_count": len(self.headers),
            "item_count": self.item_count,
            "headers": [entry.to_dict() for entry in self.headers],
        }


# =============================================================================
# Engine
# =============================================================================


class QueryEngine:
    """Run list queries against one relay.

    Args:
        relay: Connected relay client.
        config: Paging and export concurrency settings.

    Examples:
        ```python
        engine = QueryEngine(relay, config.query)
        page = await engine.list_headers(QueryParams(topic="music", limit=10, offset=20))
        ```
    """

    def __init__(self, relay: RelayClient, config: QueryConfig | None = None) -> None:
        self._relay = relay
        self._config = config or QueryConfig()
        self._logger = Logger("query")

    # -------------------------------------------------------------------------
    # Fetching
    # -------------------------------------------------------------------------

    async def fetch_all(
        self,
        list_filter: ListFilter,
        *,
        max_events: int | None = None,
        seed: Iterable[ListEvent] = (),
    ) -> list[ListEvent]:
        """Page through the relay until exhaustion (or *max_events*).

        Each page asks for ``page_size`` events older than or as old as the
        oldest event seen so far. Events are de-duplicated by id. Paging
        stops on an empty page or a page that adds nothing new, so relays
        capping responses below ``page_size`` are still read to the end.

        A page that adds nothing while being as large as the largest page
        seen so far may hide further events sharing the oldest timestamp
        (``until`` has one-second resolution); this is logged as
        ``page_window_saturated``.

        Args:
            list_filter: Server-side filter; client-side refinements are not
                applied.
            max_events: Stop once this many distinct events are collected.
            seed: Events already fetched for *list_filter*; paging resumes
                below the oldest of them.
        """
        page_size = self._config.page_size
        seen: dict[str, ListEvent] = {event.id: event for event in seed}
        until = min((event.created_at for event in seen.values()), default=list_filter.until)
        largest = len(seen)
        pages = 0

        while max_events is None or len(seen) < max_events:
            page = await self._relay.fetch(list_filter.page(until=until, limit=page_size))
            pages += 1
            added = 0
            for event in page:
                if event.id not in seen:
                    seen[event.id] = event
                    added += 1
            if not added:
                if page and len(page) >= largest:
                    self._logger.warning(
                        "page_window_saturated",
                        kinds=list_filter.kinds,
                        until=until,
                        page=len(page),
                    )
                break
            largest = max(largest, len(page))
            until = min(event.created_at for event in page)

        self._logger.debug(
            "fetch_all_completed", kinds=list_filter.kinds, pages=pages, events=len(seen)
        )
        return list(seen.values())

    async def run(self, list_filter: ListFilter) -> list[ListEvent]:
        """Fetch and refine *list_filter*.

        A single request is tried first when the server limit fits in one
        page. If the relay returns fewer events than asked for (it may cap
        responses), paging resumes from there. A name filter, an unbounded
        filter or a large ``offset + limit`` is paged from the start.
        """
        server_limit = list_filter.server_limit
        if server_limit is not None and server_limit <= self._config.page_size:
            events = await self._relay.fetch(list_filter)
            if events and len(events) < server_limit:
                events = await self.fetch_all(list_filter, max_events=server_limit, seed=events)
        else:
            events = await self.fetch_all(list_filter, max_events=server_limit)
        result = refine(events, list_filter)
        self._logger.debug(
            "query_completed", kinds=list_filter.kinds, fetched=len(events), returned=len(result)
        )
        return result

    async def count_matching(self, list_filter: ListFilter) -> int:
        """Server count when the relay supports it, else fetch-all and measure."""
        n = await self._relay.count(list_filter)
        if n is not None:
            return n
        return len(await self.fetch_all(list_filter))

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    async def list_headers(self, params: QueryParams | None = None) -> list[ListEvent]:
        return await self.run(build_filter(QueryCommand.LIST_HEADERS, params or QueryParams()))

    async def list_items(self, params: QueryParams) -> list[ListEvent]:
        """List the items linked to ``params.z``."""
        return await self.run(build_filter(QueryCommand.LIST_ITEMS, params))

    async def count(self, params: QueryParams | None = None) -> dict[str, int]:
        """Count headers and items.

        Headers are counted with the author and topic constraints. Items
        are counted with the author constraint, restricted to ``params.z``
        when it is set.
        """
        params = params or QueryParams()
        bounds = {"since": params.since, "until": params.until}
        header_filter = headers_filter(
            author=params.author, topic=params.topic, limit=None, **bounds
        )
        if params.z:
            item_filter = items_filter(params.z, author=params.author, limit=None, **bounds)
        else:
            item_filter = ListFilter(kinds=ITEM_KINDS, author=params.author, **bounds)
        return {
            "headers": await self.count_matching(header_filter),
            "items": await self.count_matching(item_filter),
        }

    async def export(self, params: QueryParams | None = None) -> ExportResult:
        """Fetch every matching header and, for each, all of its items.

        Item fetches run concurrently in an ``asyncio.TaskGroup`` bounded by
        ``export_concurrency``. The first failure cancels the outstanding
        fetches and is re-raised on its own. The result pairs every header
        with exactly its own items, in header order.

        Headers whose ``z`` pointer cannot be derived (addressable without
        ``d``) are left out and logged.
        """
        header_filter = build_filter(QueryCommand.EXPORT, params or QueryParams())
        headers = sort_events(await self.fetch_all(header_filter))

        pointers: list[tuple[ListEvent, str]] = []
        for header in headers:
            try:
                pointers.append((header, pointer_for_header(header)))
            except (HeaderMissingDTag, HeaderNotFound) as e:
                self._logger.warning("export_header_skipped", event_id=header.id, error=e.message)

        semaphore = asyncio.Semaphore(self._config.export_concurrency)

        async def _items_for(z: str) -> list[ListEvent]:
            async with semaphore:
                return sort_events(await self.fetch_all(items_filter(z, limit=None)))

        try:
            async with asyncio.TaskGroup() as tg:
                tasks = [tg.create_task(_items_for(z)) for _, z in pointers]
        except ExceptionGroup as eg:
            first = eg.exceptions[0]
            self._logger.error(
                "export_failed",
                error=str(first),
                error_type=type(first).__name__,
                failures=len(eg.exceptions),
            )
            raise first from None

        result = ExportResult(
            headers=[
                ExportEntry(header=header, z=z, items=task.result())
                for (header, z), task in zip(pointers, tasks, strict=True)
            ]
        )
        self._logger.info(
            "export_completed", headers=len(result.headers), items=result.item_count
        )
        return result

    async def inspect(self, event_id: str) -> ListEvent:
        """Fetch a single event by id.

        Raises:
            InvalidEventId: If *event_id* is malformed (before any fetch).
            HeaderNotFound: If the relay has no such event.
        """
        ref = ById(event_id)
        event = await self._relay.fetch_by_id(ref.event_id)
        if event is None:
            raise HeaderNotFound(ref.event_id)
        return event
