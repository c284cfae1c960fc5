"""
Unit tests for nips.dtag module.

Tests:
- normalize() - slug rules and fallback
- header_dtag() - deterministic, author-scoped
- item_dtag() - deterministic, parent-scoped, anchor-sensitive suffix
"""

import hashlib

import pytest

from wokhei.nips.dtag import header_dtag, item_dtag, normalize


AUTHOR = "ab" * 32
OTHER_AUTHOR = "cd" * 32
EVENT_ID = "ef" * 32


class TestNormalize:
    """normalize()."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Hello World", "hello-world"),
            ("  spaced\tout  ", "spaced-out"),
            ("café résumé", "caf-rsum"),
            ("--hello--", "hello"),
            ("a  --  b", "a-b"),
            ("https://example.com/x", "httpsexamplecomx"),
            ("Top 10", "top-10"),
        ],
    )
    def test_slug(self, text: str, expected: str) -> None:
        assert normalize(text, "fallback") == expected

    @pytest.mark.parametrize("text", ["", "   ", "!!!", "---", "日本"])
    def test_fallback(self, text: str) -> None:
        assert normalize(text, "list") == "list"


class TestHeaderDtag:
    """header_dtag()."""

    def test_format(self) -> None:
        slug = "ai-agents"
        expected = hashlib.sha256(f"header|{AUTHOR}|{slug}".encode()).hexdigest()[:8]
        assert header_dtag("AI Agents", AUTHOR) == f"{slug}--{expected}"

    def test_deterministic(self) -> None:
        assert header_dtag("Jazz", AUTHOR) == header_dtag("Jazz", AUTHOR)

    def test_author_scoped(self) -> None:
        assert header_dtag("Jazz", AUTHOR) != header_dtag("Jazz", OTHER_AUTHOR)

    def test_empty_name_uses_fallback_slug(self) -> None:
        assert header_dtag("!!!", AUTHOR).startswith("list--")


class TestItemDtag:
    """item_dtag()."""

    def test_format(self) -> None:
        anchor = "https://x"
        expected = hashlib.sha256(f"item|{EVENT_ID}|{anchor}".encode()).hexdigest()[:8]
        assert item_dtag(EVENT_ID, anchor) == f"httpsx--{expected}"

    def test_parent_scoped(self) -> None:
        coord = f"39998:{AUTHOR}:jazz"
        assert item_dtag(EVENT_ID, "https://x") != item_dtag(coord, "https://x")

    def test_same_slug_distinct_anchor(self) -> None:
        """Anchors normalizing to one slug still differ in the suffix."""
        a = item_dtag(EVENT_ID, "Song A")
        b = item_dtag(EVENT_ID, "song-a")
        assert a.split("--")[0] == b.split("--")[0] == "song-a"
        assert a != b

    def test_fallback_slug(self) -> None:
        assert item_dtag(EVENT_ID, "!!!").startswith("item--")
