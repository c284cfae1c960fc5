"""Shared validation helpers for frozen dataclass models.

Private module, not part of the public API. Used by ``__post_init__``
methods and parsers in sibling model modules to enforce runtime type
constraints, null-byte safety, and fixed-length hex identifiers.
"""

from __future__ import annotations

import string
from typing import Any

from .constants import HEX_ID_LENGTH


_HEX_DIGITS = frozenset(string.hexdigits)


def validate_instance(value: Any, expected: type | tuple[type, ...], name: str) -> None:
    """Raise ``TypeError`` if *value* is not an instance of *expected*."""
    if not isinstance(value, expected):
        names = (
            " or ".join(t.__name__ for t in expected)
            if isinstance(expected, tuple)
            else expected.__name__
        )
        article = "an" if names[0] in "AEIOUaeiou" else "a"
        raise TypeError(f"{name} must be {article} {names}, got {type(value).__name__}")


def validate_str_no_null(value: Any, name: str) -> None:
    """Raise if *value* is not a ``str`` or contains null bytes."""
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a str, got {type(value).__name__}")
    if "\x00" in value:
        raise ValueError(f"{name} contains null bytes")


def validate_str_not_empty(value: Any, name: str) -> None:
    """Raise if *value* is not a non-empty ``str`` without null bytes."""
    validate_str_no_null(value, name)
    if not value:
        raise ValueError(f"{name} must not be empty")


def validate_str_tuple(value: Any, name: str) -> None:
    """Raise if *value* is not a tuple of null-free strings."""
    validate_instance(value, tuple, name)
    for i, item in enumerate(value):
        validate_str_no_null(item, f"{name}[{i}]")


def is_hex_id(value: Any) -> bool:
    """Return True if *value* is a 64-character hex string (either case)."""
    return (
        isinstance(value, str)
        and len(value) == HEX_ID_LENGTH
        and all(c in _HEX_DIGITS for c in value)
    )
