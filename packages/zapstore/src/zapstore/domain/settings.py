"""Package manager settings domain entity."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from zapstore.domain.descriptors import DEFAULT_BLOB_STORE_URL
from zapstore.domain.exceptions import ConfigError

DEFAULT_RELAY_URL = "wss://relay.zapstore.dev"

STATE_FILE_NAME = "state.json"

_RELAY_SCHEMES = ("ws", "wss", "http", "https")


@dataclass(frozen=True)
class ZapstoreSettings:
    """Resolved package manager settings.

    Attributes:
        data_dir: Root of the installed package tree (``packages/``, ``bin/``).
        state_dir: Directory holding the registry file.
        relay_url: Relay endpoint queried for app, release and asset events.
        blob_store_url: Base URL of the content-addressed download fallback.
        resolve_timeout: Seconds allowed for resolution during install.
        search_timeout: Seconds allowed for a search query.
        update_timeout: Seconds allowed for each relay query during an update.
        download_timeout: Seconds allowed for one binary download.
    """

    data_dir: Path
    state_dir: Path
    relay_url: str = DEFAULT_RELAY_URL
    blob_store_url: str = DEFAULT_BLOB_STORE_URL
    resolve_timeout: float = 60.0
    search_timeout: float = 30.0
    update_timeout: float = 120.0
    download_timeout: float = 300.0

    def __post_init__(self) -> None:
        """Validate settings."""
        self._validate_dirs()
        self._validate_relay_url()
        self._validate_blob_store_url()
        self._validate_timeouts()

    def _validate_dirs(self) -> None:
        """Validate directories are absolute and free of traversal."""
        for name, value in [("data_dir", self.data_dir), ("state_dir", self.state_dir)]:
            text = str(value)
            if "\x00" in text:
                raise ConfigError(f"{name} contains null byte, got: {text!r}")
            path = Path(value)
            if ".." in path.parts:
                raise ConfigError(f"{name} contains path traversal, got: {text}")
            if not path.is_absolute():
                raise ConfigError(f"{name} must be an absolute path, got: {text}")

    def _validate_relay_url(self) -> None:
        if not self.relay_url or not self.relay_url.strip():
            raise ConfigError("relay_url cannot be empty")
        parsed = urlparse(self.relay_url)
        if parsed.scheme not in _RELAY_SCHEMES or not parsed.netloc:
            raise ConfigError(
                f"relay_url must be a ws, wss, http or https URL, got: {self.relay_url!r}"
            )

    def _validate_blob_store_url(self) -> None:
        parsed = urlparse(self.blob_store_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigError(
                f"blob_store_url must be an http(s) URL, got: {self.blob_store_url!r}"
            )

    def _validate_timeouts(self) -> None:
        for name in ("resolve_timeout", "search_timeout", "update_timeout", "download_timeout"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{name} must be a number, got: {value!r}")
            if value <= 0:
                raise ConfigError(f"{name} must be positive, got: {value}")

    @property
    def packages_dir(self) -> Path:
        return Path(self.data_dir) / "packages"

    @property
    def bin_dir(self) -> Path:
        return Path(self.data_dir) / "bin"

    @property
    def state_file(self) -> Path:
        return Path(self.state_dir) / STATE_FILE_NAME
