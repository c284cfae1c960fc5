"""
Unit tests for models.event module.

Tests:
- ListEvent construction and validation
- Tag helpers (find_tag, first_value, values, d_tag, name)
- Header/item classification and coordinate()
- to_dict() / from_dict() and from_nostr()
"""

from unittest.mock import MagicMock

import pytest

from wokhei.models import ListEvent


AUTHOR = "ab" * 32
EVENT_ID = "ef" * 32


def _event(**overrides) -> ListEvent:
    fields = {
        "id": EVENT_ID,
        "author": AUTHOR,
        "created_at": 1_700_000_000,
        "kind": 9998,
        "tags": (("names", "song", "songs"), ("t", "music"), ("t", "jazz")),
        "content": "",
        "sig": "00" * 64,
    }
    fields.update(overrides)
    return ListEvent(**fields)


# =============================================================================
# Construction Tests
# =============================================================================


class TestListEventConstruction:
    """ListEvent validation."""

    def test_valid(self) -> None:
        event = _event()
        assert event.kind == 9998
        assert event.tags[0] == ("names", "song", "songs")

    def test_ids_lowercased(self) -> None:
        event = _event(id=EVENT_ID.upper(), author=AUTHOR.upper())
        assert event.id == EVENT_ID
        assert event.author == AUTHOR

    def test_tags_converted_to_tuples(self) -> None:
        event = _event(tags=[["t", "x"]])
        assert event.tags == (("t", "x"),)

    @pytest.mark.parametrize("field", ["id", "author"])
    def test_invalid_hex(self, field: str) -> None:
        with pytest.raises(ValueError, match=field):
            _event(**{field: "xyz"})

    def test_negative_created_at(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            _event(created_at=-1)

    def test_bool_kind_rejected(self) -> None:
        with pytest.raises(TypeError):
            _event(kind=True)

    def test_null_byte_in_tag(self) -> None:
        with pytest.raises(ValueError, match="null"):
            _event(tags=(("t", "a\x00"),))


# =============================================================================
# Tag Helper Tests
# =============================================================================


class TestTagHelpers:
    """Tag lookup helpers."""

    def test_find_tag(self) -> None:
        assert _event().find_tag("t") == ("t", "music")
        assert _event().find_tag("missing") is None

    def test_first_value(self) -> None:
        assert _event().first_value("names") == "song"
        assert _event(tags=(("alt",),)).first_value("alt") is None

    def test_values(self) -> None:
        assert _event().values("t") == ["music", "jazz"]

    def test_name(self) -> None:
        assert _event().name == "song"
        assert _event(tags=()).name is None

    def test_d_tag(self) -> None:
        assert _event(tags=(("d", "jazz"),)).d_tag == "jazz"
        assert _event().d_tag is None


class TestClassification:
    """is_header / is_item / coordinate()."""

    @pytest.mark.parametrize(
        ("kind", "is_header", "is_item"),
        [
            (9998, True, False),
            (39998, True, False),
            (9999, False, True),
            (39999, False, True),
            (1, False, False),
        ],
    )
    def test_kinds(self, kind: int, is_header: bool, is_item: bool) -> None:
        event = _event(kind=kind)
        assert event.is_header is is_header
        assert event.is_item is is_item

    def test_coordinate_of_addressable_header(self) -> None:
        event = _event(kind=39998, tags=(("d", "jazz"),))
        assert str(event.coordinate()) == f"39998:{AUTHOR}:jazz"

    def test_no_coordinate_for_regular_header(self) -> None:
        assert _event(tags=(("d", "jazz"),)).coordinate() is None

    def test_no_coordinate_without_d_tag(self) -> None:
        assert _event(kind=39998).coordinate() is None


# =============================================================================
# Conversion Tests
# =============================================================================


class TestConversion:
    """to_dict() / from_dict() / from_nostr()."""

    def test_to_dict_uses_pubkey(self) -> None:
        data = _event().to_dict()
        assert data["pubkey"] == AUTHOR
        assert data["tags"][0] == ["names", "song", "songs"]
        assert "author" not in data

    def test_from_dict_accepts_both_keys(self) -> None:
        event = _event()
        assert ListEvent.from_dict(event.to_dict()) == event
        data = event.to_dict()
        data["author"] = data.pop("pubkey")
        assert ListEvent.from_dict(data) == event

    def test_from_nostr(self) -> None:
        mock = MagicMock()
        mock.id.return_value.to_hex.return_value = EVENT_ID
        mock.author.return_value.to_hex.return_value = AUTHOR
        mock.created_at.return_value.as_secs.return_value = 1_700_000_000
        mock.kind.return_value.as_u16.return_value = 9999
        tag = MagicMock()
        tag.as_vec.return_value = ["z", EVENT_ID]
        mock.tags.return_value.to_vec.return_value = [tag]
        mock.content.return_value = "hello"
        mock.signature.return_value = "aa" * 64

        event = ListEvent.from_nostr(mock)

        assert event.id == EVENT_ID
        assert event.kind == 9999
        assert event.tags == (("z", EVENT_ID),)
        assert event.content == "hello"
        assert event.sig == "aa" * 64
