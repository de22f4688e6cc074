"""Unit tests for EnvironmentSettingsLoader adapter."""

from __future__ import annotations

from pathlib import Path

import pytest

from zapstore.adapters.environment_settings import EnvironmentSettingsLoader
from zapstore.domain.exceptions import ConfigError
from zapstore.domain.settings import DEFAULT_RELAY_URL


@pytest.mark.tier(1)
@pytest.mark.tra("Adapter.EnvironmentSettings")
class TestEnvironmentSettingsLoader:
    """Test directory resolution and config precedence."""

    def test_xdg_defaults_under_home(self, tmp_path: Path) -> None:
        """Test directories default to the XDG locations under home."""
        settings = EnvironmentSettingsLoader(environ={}, home=tmp_path).load()

        assert settings.data_dir == tmp_path / ".local" / "share" / "zapstore"
        assert settings.state_dir == tmp_path / ".local" / "state" / "zapstore"
        assert settings.relay_url == DEFAULT_RELAY_URL

    def test_xdg_variables(self, tmp_path: Path) -> None:
        """Test XDG variables move the data and state directories."""
        environ = {
            "XDG_DATA_HOME": str(tmp_path / "data"),
            "XDG_STATE_HOME": str(tmp_path / "state"),
        }
        settings = EnvironmentSettingsLoader(environ=environ, home=tmp_path).load()

        assert settings.data_dir == tmp_path / "data" / "zapstore"
        assert settings.state_dir == tmp_path / "state" / "zapstore"

    def test_config_path_default(self, tmp_path: Path) -> None:
        """Test the config file defaults to ~/.config/zapstore/config.yaml."""
        loader = EnvironmentSettingsLoader(environ={}, home=tmp_path)
        assert loader.config_path() == tmp_path / ".config" / "zapstore" / "config.yaml"

    def test_legacy_dir(self, tmp_path: Path) -> None:
        """Test the legacy directory is ~/.zapstore."""
        assert EnvironmentSettingsLoader(environ={}, home=tmp_path).legacy_dir() == tmp_path / ".zapstore"

    def test_config_file_applied(self, tmp_path: Path) -> None:
        """Test values from the config file override defaults."""
        config = tmp_path / ".config" / "zapstore" / "config.yaml"
        config.parent.mkdir(parents=True)
        config.write_text("relay_url: wss://relay.example.com\ntimeouts:\n  search: 5\n")

        settings = EnvironmentSettingsLoader(environ={}, home=tmp_path).load()

        assert settings.relay_url == "wss://relay.example.com"
        assert settings.search_timeout == 5

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        """Test ZAPSTORE_CONFIG selects the config file."""
        config = tmp_path / "custom.yaml"
        config.write_text("blob_store_url: https://blobs.example.com/\n")

        loader = EnvironmentSettingsLoader(environ={"ZAPSTORE_CONFIG": str(config)}, home=tmp_path)

        assert loader.load().blob_store_url == "https://blobs.example.com/"

    def test_relay_url_variable_wins(self, tmp_path: Path) -> None:
        """Test RELAY_URL overrides the config file."""
        config = tmp_path / "custom.yaml"
        config.write_text("relay_url: wss://from-config.example.com\n")
        environ = {"ZAPSTORE_CONFIG": str(config), "RELAY_URL": "wss://from-env.example.com"}

        settings = EnvironmentSettingsLoader(environ=environ, home=tmp_path).load()

        assert settings.relay_url == "wss://from-env.example.com"

    def test_invalid_relay_url_variable(self, tmp_path: Path) -> None:
        """Test an invalid RELAY_URL raises ConfigError."""
        loader = EnvironmentSettingsLoader(environ={"RELAY_URL": "not a url"}, home=tmp_path)

        with pytest.raises(ConfigError, match="relay_url"):
            loader.load()

    def test_invalid_config_file(self, tmp_path: Path) -> None:
        """Test an invalid config file raises ConfigError."""
        config = tmp_path / "custom.yaml"
        config.write_text("colour: blue\n")
        loader = EnvironmentSettingsLoader(environ={"ZAPSTORE_CONFIG": str(config)}, home=tmp_path)

        with pytest.raises(ConfigError, match="Unknown config key"):
            loader.load()

    def test_missing_config_file_is_ignored(self, tmp_path: Path) -> None:
        """Test a missing config file leaves defaults in place."""
        loader = EnvironmentSettingsLoader(
            environ={"ZAPSTORE_CONFIG": str(tmp_path / "absent.yaml")}, home=tmp_path
        )
        assert loader.load().relay_url == DEFAULT_RELAY_URL
