"""Client configuration.

[WokheiConfig][wokhei.core.config.WokheiConfig] groups every tunable of a
session: relay URL, per-operation timeouts, query paging and export
fan-out, the ``client`` tag value and the name of the environment variable
holding the signing key.

Sources, highest precedence first:

* relay: ``--relay`` flag, ``WOKHEI_RELAY``, config file ``relay``, default
  ``ws://localhost:7777``;
* config file: ``--config`` flag, ``WOKHEI_CONFIG``, none (all defaults).

```yaml
# config/wokhei.yaml
relay: wss://relay.example.com
timeouts:
  connect: 5.0
  fetch: 15.0
query:
  page_size: 500
  export_concurrency: 8
```

See Also:
    [load_yaml()][wokhei.core.yaml.load_yaml]: Safe YAML loader used by
        [from_yaml()][wokhei.core.config.WokheiConfig.from_yaml].
    [NostrRelayClient][wokhei.utils.protocol.NostrRelayClient]: Consumes
        ``relay``, ``timeouts`` and ``keys_env``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pydantic
from pydantic import BaseModel, Field, field_validator

from wokhei.exceptions import ConfigurationError
from wokhei.models.constants import CLIENT_ID, DEFAULT_RELAY

from .yaml import load_yaml


ENV_RELAY = "WOKHEI_RELAY"
ENV_CONFIG = "WOKHEI_CONFIG"
ENV_PRIVATE_KEY = "WOKHEI_PRIVATE_KEY"  # pragma: allowlist secret

_RELAY_SCHEMES = ("ws://", "wss://")


class TimeoutsConfig(BaseModel):
    """Relay operation timeouts (in seconds)."""

    connect: float = Field(default=10.0, gt=0.0, description="Relay connection timeout")
    fetch: float = Field(default=10.0, gt=0.0, description="Per-request fetch timeout")
    publish: float = Field(default=10.0, gt=0.0, description="Publish acknowledgement timeout")


class QueryConfig(BaseModel):
    """Query engine paging and concurrency.

    Note:
        ``page_size`` is an upper bound per request. Relays with a lower
        per-request cap are paged until a page brings no new events.
    """

    page_size: int = Field(default=500, ge=1, le=5_000, description="Events per paged fetch")
    export_concurrency: int = Field(
        default=8, ge=1, le=64, description="Concurrent per-header item fetches in export"
    )


class WokheiConfig(BaseModel):
    """Aggregate client configuration.

    See Also:
        [resolve_config()][wokhei.core.config.resolve_config]: Applies the
            flag/environment/file precedence rules.
    """

    relay: str = Field(default=DEFAULT_RELAY, description="Relay WebSocket URL")
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)
    query: QueryConfig = Field(default_factory=QueryConfig)
    client_id: str = Field(default=CLIENT_ID, min_length=1, description="Value of the client tag")
    keys_env: str = Field(
        default=ENV_PRIVATE_KEY,
        min_length=1,
        description="Environment variable holding the nsec or hex secret key",
    )

    @field_validator("relay")
    @classmethod
    def validate_relay(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(_RELAY_SCHEMES):
            raise ValueError(f"relay must be a ws:// or wss:// URL, got {v!r}")
        return v

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> WokheiConfig:
        """Load and validate a YAML config file.

        Raises:
            ConfigurationError: If the file cannot be loaded or fails validation.
        """
        return cls.from_dict(load_yaml(config_path))

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> WokheiConfig:
        """Validate a config mapping.

        Raises:
            ConfigurationError: Wrapping the pydantic validation error.
        """
        try:
            return cls(**config_dict)
        except pydantic.ValidationError as e:
            errors = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ConfigurationError(f"Invalid configuration: {errors}") from e


def resolve_config(
    *,
    config_path: str | Path | None = None,
    relay: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> WokheiConfig:
    """Build the effective configuration for one invocation.

    Args:
        config_path: ``--config`` flag value.
        relay: ``--relay`` flag value.
        environ: Environment mapping, ``os.environ`` by default.

    Raises:
        ConfigurationError: If the config file is missing or invalid, or the
            effective relay URL is not a WebSocket URL.
    """
    env = os.environ if environ is None else environ

    path = config_path or env.get(ENV_CONFIG) or None
    data: dict[str, Any] = dict(load_yaml(path)) if path else {}

    override = relay or env.get(ENV_RELAY)
    if override:
        data["relay"] = override

    return WokheiConfig.from_dict(data)
