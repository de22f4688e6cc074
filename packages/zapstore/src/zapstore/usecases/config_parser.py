"""Config parser use case for zapstore."""

from __future__ import annotations

import os
from dataclasses import replace
from pathlib import Path
from typing import Any

import yaml

from zapstore.domain.exceptions import ConfigError
from zapstore.domain.settings import ZapstoreSettings

_TIMEOUT_FIELDS = {
    "resolve": "resolve_timeout",
    "search": "search_timeout",
    "update": "update_timeout",
    "download": "download_timeout",
}

_KNOWN_KEYS = frozenset(
    {"relay_url", "blob_store_url", "data_dir", "state_dir", "timeouts"}
)


class ConfigParser:
    """Parses a zapstore YAML config file onto base settings.

    Example config::

        relay_url: wss://relay.example.com
        data_dir: ~/apps/zapstore
        timeouts:
          search: 10
          download: 600
    """

    def parse(self, yaml_str: str, base: ZapstoreSettings) -> ZapstoreSettings:
        """Apply a YAML config on top of ``base``.

        Args:
            yaml_str: YAML document. An empty document changes nothing.
            base: Settings the config overrides.

        Returns:
            New ZapstoreSettings with the config applied.

        Raises:
            ConfigError: If the YAML is invalid or has unknown or mistyped keys.
        """
        try:
            config = yaml.safe_load(yaml_str)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e

        if config is None:
            return base
        if not isinstance(config, dict):
            raise ConfigError("Config must be a dictionary")

        unknown = sorted(set(config) - _KNOWN_KEYS)
        if unknown:
            raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")

        overrides: dict[str, Any] = {}

        for key in ("relay_url", "blob_store_url"):
            if key in config:
                overrides[key] = self._string(config, key)

        for key in ("data_dir", "state_dir"):
            if key in config:
                overrides[key] = Path(os.path.expanduser(self._string(config, key)))

        timeouts = config.get("timeouts") or {}
        if not isinstance(timeouts, dict):
            raise ConfigError("timeouts must be a dictionary")
        for name, value in timeouts.items():
            if name not in _TIMEOUT_FIELDS:
                raise ConfigError(f"Unknown timeout: {name}")
            overrides[_TIMEOUT_FIELDS[name]] = value

        # Settings validate themselves on construction
        return replace(base, **overrides)

    @staticmethod
    def _string(config: dict[str, Any], key: str) -> str:
        value = config[key]
        if not isinstance(value, str):
            raise ConfigError(f"{key} must be a string, got: {value!r}")
        return value
