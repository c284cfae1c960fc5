"""
Integration tests: publish and query lists against a real relay.

Tests:
- Regular header, item by id, list-items
- Addressable header, item by coordinate, export pairing
- list-headers paging with offset and limit
- count and deletion requests
"""

from __future__ import annotations

import pytest

from wokhei.exceptions import NoResults
from wokhei.models import ByCoordinate, ById, CustomField, HeaderSpec, ItemSpec
from wokhei.services.query import QueryParams


pytestmark = pytest.mark.integration


class TestRegularList:
    """Header referenced by event id."""

    async def test_create_add_list(self, service) -> None:
        header = await service.create_header(HeaderSpec(name="song", plural="songs"))
        item = await service.add_item(
            ItemSpec(
                parent=ById(header["event_id"]),
                resource="https://example.com/a",
                fields=(CustomField("artist", "Miles"),),
            )
        )
        assert item["z"] == header["event_id"]

        listed = await service.list_items(ById(header["event_id"]))
        assert listed["count"] == 1
        assert listed["items"][0]["event_id"] == item["event_id"]


class TestAddressableList:
    """Header referenced by coordinate."""

    async def test_create_add_export(self, service) -> None:
        header = await service.create_header(
            HeaderSpec(name="playlist", addressable=True, d_tag="jazz")
        )
        ref = ByCoordinate.parse(header["coordinate"])
        for i in range(3):
            await service.add_item(ItemSpec(parent=ref, resource=f"https://x/{i}"))

        exported = await service.export(QueryParams(author=header["pubkey"]))
        assert exported["header_count"] == 1
        assert exported["headers"][0]["z"] == header["coordinate"]
        assert exported["headers"][0]["item_count"] == 3


class TestPaging:
    """list-headers offset/limit against relay ordering."""

    async def test_offset_limit(self, service) -> None:
        created = []
        for i in range(5):
            created.append(await service.create_header(HeaderSpec(name=f"page-{i}")))
        author = created[0]["pubkey"]

        page = await service.list_headers(QueryParams(author=author, limit=2, offset=1))
        assert page["count"] == 2

        with pytest.raises(NoResults):
            await service.list_headers(QueryParams(author=author, offset=10))


class TestCountAndDelete:
    """count and NIP-09 deletion."""

    async def test_count(self, service) -> None:
        header = await service.create_header(HeaderSpec(name="counted"))
        await service.add_item(ItemSpec(parent=ById(header["event_id"])))
        counts = await service.count(QueryParams(author=header["pubkey"]))
        assert counts == {"headers": 1, "items": 1}

    async def test_delete(self, service) -> None:
        header = await service.create_header(HeaderSpec(name="temporary"))
        result = await service.delete([header["event_id"]], "test cleanup")
        assert result["deleted"] == [header["event_id"]]
