"""
Unit tests for the wokhei.exceptions module.

Tests:
- Hierarchy (every error is a WokheiError, validation errors group)
- Machine codes and the retryable flag
- Fix hints (class default and per-instance override)
- to_dict() rendering
- Structured attributes (value, reason, url, event_id)
"""

import pytest

from wokhei.exceptions import (
    ConfigurationError,
    HeaderMissingDTag,
    HeaderNotFound,
    InvalidArgs,
    InvalidCoordinate,
    InvalidEventId,
    KeysNotFound,
    NoResults,
    RelayError,
    RelayRejected,
    RelayUnreachable,
    ValidationError,
    WokheiError,
)


ALL_ERRORS = [
    ConfigurationError("x"),
    KeysNotFound("x"),
    InvalidArgs("x"),
    InvalidCoordinate("v", "r"),
    InvalidEventId("v"),
    HeaderMissingDTag("x"),
    HeaderNotFound("id"),
    NoResults(),
    RelayUnreachable("ws://r"),
    RelayRejected("ws://r", "blocked"),
]


# =============================================================================
# Hierarchy Tests
# =============================================================================


class TestHierarchy:
    """Exception class hierarchy."""

    @pytest.mark.parametrize("error", ALL_ERRORS, ids=lambda e: type(e).__name__)
    def test_all_are_wokhei_errors(self, error: WokheiError) -> None:
        assert isinstance(error, WokheiError)
        assert isinstance(error, Exception)

    @pytest.mark.parametrize(
        "cls", [InvalidArgs, InvalidCoordinate, InvalidEventId, HeaderMissingDTag]
    )
    def test_validation_group(self, cls: type) -> None:
        assert issubclass(cls, ValidationError)

    def test_relay_group(self) -> None:
        assert issubclass(RelayUnreachable, RelayError)
        assert issubclass(RelayRejected, RelayError)


# =============================================================================
# Codes And Flags Tests
# =============================================================================


class TestCodes:
    """Machine codes and retryable flags."""

    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (InvalidArgs("x"), "INVALID_ARGS"),
            (InvalidCoordinate("v", "r"), "INVALID_COORDINATE"),
            (InvalidEventId("v"), "INVALID_EVENT_ID"),
            (HeaderMissingDTag("x"), "HEADER_MISSING_D_TAG"),
            (HeaderNotFound("id"), "HEADER_NOT_FOUND"),
            (NoResults(), "NO_RESULTS"),
            (RelayUnreachable("ws://r"), "RELAY_UNREACHABLE"),
            (RelayRejected("ws://r", "x"), "RELAY_REJECTED"),
            (KeysNotFound("x"), "KEYS_NOT_FOUND"),
            (ConfigurationError("x"), "CONFIGURATION_ERROR"),
        ],
    )
    def test_code(self, error: WokheiError, code: str) -> None:
        assert error.code == code

    @pytest.mark.parametrize("error", ALL_ERRORS, ids=lambda e: type(e).__name__)
    def test_only_unreachable_is_retryable(self, error: WokheiError) -> None:
        assert error.retryable is isinstance(error, RelayUnreachable)


# =============================================================================
# Rendering Tests
# =============================================================================


class TestRendering:
    """Messages, fix hints and to_dict()."""

    def test_default_fix(self) -> None:
        assert InvalidArgs("x").fix == InvalidArgs.default_fix

    def test_fix_override(self) -> None:
        assert InvalidArgs("x", fix="do this").fix == "do this"

    def test_to_dict(self) -> None:
        error = RelayUnreachable("ws://r", "refused")
        assert error.to_dict() == {
            "code": "RELAY_UNREACHABLE",
            "message": "Relay unreachable: ws://r (refused)",
            "retryable": True,
            "fix": RelayUnreachable.default_fix,
        }

    def test_str_is_message(self) -> None:
        assert str(NoResults()) == "No results for query"

    def test_structured_attributes(self) -> None:
        coord = InvalidCoordinate("1:x:y", "bad kind")
        assert (coord.value, coord.reason) == ("1:x:y", "bad kind")
        assert "1:x:y" in coord.message
        assert InvalidEventId("abc").value == "abc"
        assert HeaderNotFound("id1").event_id == "id1"
        assert "no event returned" in HeaderNotFound("id1").message
        rejected = RelayRejected("ws://r", "blocked")
        assert (rejected.url, rejected.reason) == ("ws://r", "blocked")

    def test_unreachable_without_reason(self) -> None:
        assert RelayUnreachable("ws://r").message == "Relay unreachable: ws://r"
