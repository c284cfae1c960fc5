"""Wokhei exception hierarchy.

Provides typed exceptions for every error kind the list core surfaces.
Each exception carries a stable machine ``code``, a ``retryable`` flag, and
a human ``fix`` hint so that callers (the CLI, or an agent driving it) can
decide what to do without parsing messages.

This module has no dependencies on the rest of the package, so every layer
(including the pure ``models`` layer) can raise typed errors.

Exception hierarchy:

```text
WokheiError (base -- never raised directly)
├── ConfigurationError       -- config validation, bad YAML, bad env values
├── KeysNotFound             -- no signing key available for a publish
├── ValidationError          -- detected before any network access
│   ├── InvalidArgs          -- malformed or conflicting builder/resolver input
│   ├── InvalidCoordinate    -- kind:pubkey:d-tag fails validation
│   ├── InvalidEventId       -- id fails fixed-length hex validation
│   └── HeaderMissingDTag    -- addressable header without a d tag
├── HeaderNotFound           -- id lookup returned nothing usable as a header
├── NoResults                -- a query's refined result set is empty
└── RelayError               -- failures reported by the relay client
    ├── RelayUnreachable     -- transport failure (retryable)
    └── RelayRejected        -- the relay refused a published event
```

See Also:
    [RelayClient][wokhei.core.relay_client.RelayClient]: Interface whose
        implementations raise the [RelayError][wokhei.exceptions.RelayError]
        subclasses.
"""

from __future__ import annotations

from typing import Any, ClassVar


class WokheiError(Exception):
    """Base exception for all Wokhei errors.

    Never raised directly -- always use a specific subclass.

    Args:
        message: Human-readable description of the failure.
        fix: Optional override of the class-level fix hint.
    """

    code: ClassVar[str] = "INTERNAL_ERROR"
    retryable: ClassVar[bool] = False
    default_fix: ClassVar[str] = "This is a bug, please report it"

    def __init__(self, message: str, *, fix: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.fix = fix or self.default_fix

    def to_dict(self) -> dict[str, Any]:
        """Render the error as a JSON-ready mapping."""
        return {
            "code": self.code,
            "message": self.message,
            "retryable": self.retryable,
            "fix": self.fix,
        }


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(WokheiError):
    """Invalid or missing configuration (YAML, env vars, CLI flags)."""

    code = "CONFIGURATION_ERROR"
    default_fix = "Check the config file and WOKHEI_* environment variables"


class KeysNotFound(WokheiError):
    """No signing key is available for an operation that publishes."""

    code = "KEYS_NOT_FOUND"
    default_fix = "Export WOKHEI_PRIVATE_KEY=<nsec or hex secret key> before publishing"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class ValidationError(WokheiError):
    """Base for input errors detected before any network access."""

    code = "VALIDATION_ERROR"


class InvalidArgs(ValidationError):
    """Malformed or conflicting input to a builder or resolver."""

    code = "INVALID_ARGS"
    default_fix = "Check the command arguments"


class InvalidCoordinate(ValidationError):
    """A coordinate string fails structural or identity-format validation."""

    code = "INVALID_COORDINATE"
    default_fix = "Format: 39998:<64-hex pubkey>:<d-tag> (e.g. 39998:ab12...:my-list)"

    def __init__(self, value: str, reason: str, *, fix: str | None = None) -> None:
        super().__init__(f"Invalid coordinate {value!r}: {reason}", fix=fix)
        self.value = value
        self.reason = reason


class InvalidEventId(ValidationError):
    """An event id fails fixed-length hex validation."""

    code = "INVALID_EVENT_ID"
    default_fix = "Use a 64-character hex event id from a previous command's result"

    def __init__(self, value: str, *, fix: str | None = None) -> None:
        super().__init__(f"Invalid event id: {value!r}", fix=fix)
        self.value = value


class HeaderMissingDTag(ValidationError):
    """An addressable header spec or fetched addressable header lacks ``d``."""

    code = "HEADER_MISSING_D_TAG"
    default_fix = "Addressable headers need a d-tag: pass --d-tag=<identifier>"


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


class HeaderNotFound(WokheiError):
    """An id lookup returned no event, or an event that is not a list header."""

    code = "HEADER_NOT_FOUND"
    default_fix = "Verify the event id, or use --header-coordinate for cross-relay references"

    def __init__(self, event_id: str, reason: str = "no event returned") -> None:
        super().__init__(f"Header not found: {event_id} ({reason})")
        self.event_id = event_id


class NoResults(WokheiError):
    """A query's refined result set is empty."""

    code = "NO_RESULTS"
    default_fix = "Try different filters, or check that the relay has data"

    def __init__(self, message: str = "No results for query", *, fix: str | None = None) -> None:
        super().__init__(message, fix=fix)


# ---------------------------------------------------------------------------
# Relay
# ---------------------------------------------------------------------------


class RelayError(WokheiError):
    """Base for failures reported by the relay client."""

    code = "RELAY_ERROR"


class RelayUnreachable(RelayError):
    """Transport-level failure talking to the relay.

    The only retryable error kind: the same request may succeed once the
    relay is reachable again.
    """

    code = "RELAY_UNREACHABLE"
    retryable = True
    default_fix = "Check that the relay is running and the URL is correct"

    def __init__(self, url: str, reason: str = "") -> None:
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Relay unreachable: {url}{detail}")
        self.url = url


class RelayRejected(RelayError):
    """The relay refused a published event."""

    code = "RELAY_REJECTED"
    default_fix = "Check the event format and the relay write policy"

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Relay {url} rejected event: {reason}")
        self.url = url
        self.reason = reason
