"""Settings resolution from the process environment.

Directories follow the XDG base directory layout:

- data: ``$XDG_DATA_HOME/zapstore`` (default ``~/.local/share/zapstore``)
- state: ``$XDG_STATE_HOME/zapstore`` (default ``~/.local/state/zapstore``)
- config: ``$ZAPSTORE_CONFIG`` or ``$XDG_CONFIG_HOME/zapstore/config.yaml``
  (default ``~/.config/zapstore/config.yaml``)

Precedence, lowest first: built-in defaults, config file, ``RELAY_URL``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path

from zapstore.domain.exceptions import ConfigError
from zapstore.domain.settings import ZapstoreSettings
from zapstore.usecases.config_parser import ConfigParser

logger = logging.getLogger(__name__)

APP_DIR_NAME = "zapstore"


class EnvironmentSettingsLoader:
    """Builds ZapstoreSettings from environment variables and a config file."""

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        home: Path | None = None,
        parser: ConfigParser | None = None,
    ) -> None:
        """Initialize the loader.

        Args:
            environ: Environment mapping; defaults to ``os.environ``.
            home: Home directory; defaults to ``Path.home()``.
            parser: Config parser; defaults to a new ConfigParser.
        """
        self._environ = environ if environ is not None else os.environ
        self._home = home
        self._parser = parser or ConfigParser()

    @property
    def home(self) -> Path:
        return self._home if self._home is not None else Path.home()

    def _xdg_dir(self, variable: str, *default: str) -> Path:
        value = self._environ.get(variable, "")
        if value:
            return Path(value) / APP_DIR_NAME
        return self.home.joinpath(*default, APP_DIR_NAME)

    def data_dir(self) -> Path:
        return self._xdg_dir("XDG_DATA_HOME", ".local", "share")

    def state_dir(self) -> Path:
        return self._xdg_dir("XDG_STATE_HOME", ".local", "state")

    def config_path(self) -> Path:
        explicit = self._environ.get("ZAPSTORE_CONFIG", "")
        if explicit:
            return Path(os.path.expanduser(explicit))
        return self._xdg_dir("XDG_CONFIG_HOME", ".config") / "config.yaml"

    def legacy_dir(self) -> Path:
        return self.home / ".zapstore"

    def load(self) -> ZapstoreSettings:
        """Resolve settings.

        Returns:
            Validated settings.

        Raises:
            ConfigError: If the config file cannot be read or holds invalid
                values, or the resulting settings are invalid.
        """
        settings = ZapstoreSettings(data_dir=self.data_dir(), state_dir=self.state_dir())

        config_path = self.config_path()
        if config_path.is_file():
            logger.debug("Reading config file %s", config_path)
            try:
                text = config_path.read_text(encoding="utf-8")
            except OSError as e:
                raise ConfigError(f"Cannot read config file {config_path}: {e}") from e
            settings = self._parser.parse(text, settings)

        relay_url = self._environ.get("RELAY_URL", "")
        if relay_url:
            settings = replace(settings, relay_url=relay_url)

        return settings
