"""Signing key loading from the environment.

Keys are never read from configuration files or command-line flags: the
secret key (``nsec1...`` bech32 or 64-character hex) comes from the
environment variable named by
[WokheiConfig.keys_env][wokhei.core.config.WokheiConfig] (default
``WOKHEI_PRIVATE_KEY``).

Read-only commands (queries, ``inspect``) work without a key;
[load_optional_keys()][wokhei.utils.keys.load_optional_keys] returns None in
that case and the relay client refuses to publish.

Examples:
    ```python
    keys = load_keys_from_env("WOKHEI_PRIVATE_KEY")
    keys.public_key().to_hex()
    ```
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from nostr_sdk import Keys, NostrSdkError

from wokhei.exceptions import ConfigurationError, KeysNotFound


def load_keys_from_env(env_var: str, *, environ: Mapping[str, str] | None = None) -> Keys:
    """Load signing keys from *env_var*.

    Args:
        env_var: Name of the environment variable holding the secret key.
        environ: Environment mapping, ``os.environ`` by default.

    Raises:
        KeysNotFound: If the variable is unset or empty.
        ConfigurationError: If the value is not a valid secret key.

    Warning:
        The returned ``Keys`` holds the secret key in memory for the
        lifetime of the process. Never log or serialize it.
    """
    env = os.environ if environ is None else environ
    value = env.get(env_var, "").strip()

    if not value:
        raise KeysNotFound(
            f"{env_var} environment variable is not set",
            fix=f"Export {env_var}=<nsec1... or hex secret key> before publishing",
        )

    try:
        return Keys.parse(value)
    except NostrSdkError as e:
        # never echo the value
        raise ConfigurationError(
            f"{env_var} does not hold a valid secret key",
            fix=f"Set {env_var} to an nsec1 bech32 or 64-character hex secret key",
        ) from e


def load_optional_keys(env_var: str, *, environ: Mapping[str, str] | None = None) -> Keys | None:
    """Like [load_keys_from_env()][wokhei.utils.keys.load_keys_from_env], but None when unset.

    Raises:
        ConfigurationError: If the variable is set to an invalid key.
    """
    try:
        return load_keys_from_env(env_var, environ=environ)
    except KeysNotFound:
        return None
