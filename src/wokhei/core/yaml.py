"""YAML configuration loading.

Safe YAML file loading with ``yaml.safe_load``. Used by
[WokheiConfig.from_yaml()][wokhei.core.config.WokheiConfig.from_yaml].
Errors are reported as
[ConfigurationError][wokhei.exceptions.ConfigurationError] so the CLI can
render them in its error envelope like any other failure.

Examples:
    ```python
    from wokhei.core.yaml import load_yaml

    data = load_yaml("config/wokhei.yaml")
    ```
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from wokhei.exceptions import ConfigurationError


def load_yaml(config_path: str | Path) -> dict[str, Any]:
    """Load and parse a YAML mapping.

    Only standard YAML types are accepted (``yaml.safe_load``); no Python
    object is ever instantiated from YAML tags.

    Returns:
        The parsed mapping, or an empty dict for an empty file.

    Raises:
        ConfigurationError: If the file is missing or unreadable, is not
            valid YAML, or its top level is not a mapping.

    Warning:
        The structure of the mapping is not validated here. Pass it to
        [WokheiConfig][wokhei.core.config.WokheiConfig] for that.
    """
    path = Path(config_path)
    if not path.is_file():
        raise ConfigurationError(
            f"Config file not found: {config_path}",
            fix="Pass --config=<path> to an existing YAML file, or unset WOKHEI_CONFIG",
        )

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {config_path} must contain a mapping, got {type(data).__name__}"
        )
    return data
