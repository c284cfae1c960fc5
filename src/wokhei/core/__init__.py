"""Core layer: logging, configuration and the relay client interface.

Sits in the middle of the diamond DAG -- depends only on
[wokhei.models][wokhei.models] and is depended upon by
[wokhei.services][wokhei.services].

Attributes:
    Logger: Structured logger with key=value and JSON output.
        See [Logger][wokhei.core.logger.Logger].
    WokheiConfig: Pydantic client configuration with
        [resolve_config()][wokhei.core.config.resolve_config] applying the
        flag/environment/file precedence.
    RelayClient: Abstract relay capability injected into the resolver and
        query engine. See [RelayClient][wokhei.core.relay_client.RelayClient].
    YAML: Safe YAML loading. See [load_yaml()][wokhei.core.yaml.load_yaml].
"""

from .config import (
    ENV_CONFIG,
    ENV_PRIVATE_KEY,
    ENV_RELAY,
    QueryConfig,
    TimeoutsConfig,
    WokheiConfig,
    resolve_config,
)
from .logger import LOG_LEVELS, Logger, StructuredFormatter, format_kv_pairs, setup_logging
from .relay_client import PublishResult, RelayClient
from .yaml import load_yaml


__all__ = [
    "ENV_CONFIG",
    "ENV_PRIVATE_KEY",
    "ENV_RELAY",
    "LOG_LEVELS",
    "Logger",
    "PublishResult",
    "QueryConfig",
    "RelayClient",
    "StructuredFormatter",
    "TimeoutsConfig",
    "WokheiConfig",
    "format_kv_pairs",
    "load_yaml",
    "resolve_config",
    "setup_logging",
]
