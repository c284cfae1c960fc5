"""Deterministic d-tag derivation for addressable list events.

An addressable event is identified by ``(kind, author, d-tag)``. Publishing
the same logical list twice with the same d-tag replaces the earlier event
instead of creating a duplicate, so a stable d-tag is useful when a caller
does not want to invent one.

Derived d-tags have the form ``{slug}--{suffix}``:

* ``slug`` is the human input normalized to ``[a-z0-9-]`` by
  [normalize()][wokhei.nips.dtag.normalize];
* ``suffix`` is the first 8 hex characters of a SHA-256 over a
  ``|``-separated preimage that includes the owner of the identity (the
  author for headers, the parent ``z`` pointer for items).

Derivation is opt-in (``--derive-d-tag``). The builders in
[wokhei.nips.event_builders][] never derive a d-tag implicitly.

Examples:
    ```python
    header_dtag("AI Agents on Nostr", pubkey)   # "ai-agents-on-nostr--3f2a9c1e"
    item_dtag(z, "https://example.com")          # "httpsexamplecom--..."
    ```
"""

from __future__ import annotations

import hashlib
import re


_SUFFIX_LENGTH = 8
_HYPHEN_RUNS = re.compile(r"-+")


def _suffix(preimage: str) -> str:
    return hashlib.sha256(preimage.encode("utf-8")).hexdigest()[:_SUFFIX_LENGTH]


def normalize(text: str, fallback: str) -> str:
    """Normalize a human string into a URL-safe slug.

    Lowercases, maps ASCII whitespace to ``-``, drops every character outside
    ``[a-z0-9-]`` (non-ASCII letters included), then collapses and trims
    hyphen runs.

    Args:
        text: Input text.
        fallback: Returned when the input normalizes to the empty string.
    """
    chars = []
    for c in text.strip().lower():
        if c in " \t\n\r\f\v":
            chars.append("-")
        elif ("a" <= c <= "z") or ("0" <= c <= "9") or c == "-":
            chars.append(c)
    slug = _HYPHEN_RUNS.sub("-", "".join(chars)).strip("-")
    return slug or fallback


def header_dtag(name: str, author: str) -> str:
    """Derive the d-tag of an addressable header from its name and author."""
    slug = normalize(name, "list")
    return f"{slug}--{_suffix(f'header|{author}|{slug}')}"


def item_dtag(z: str, anchor: str) -> str:
    """Derive the d-tag of an addressable item from its parent and anchor.

    The suffix hashes the raw *anchor*, not its slug, so anchors that
    normalize to the same slug still get distinct d-tags.
    """
    slug = normalize(anchor, "item")
    return f"{slug}--{_suffix(f'item|{z}|{anchor}')}"


__all__ = ["header_dtag", "item_dtag", "normalize"]
