"""Factory functions wiring the package manager to its real adapters."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx

from zapstore.adapters.environment_settings import EnvironmentSettingsLoader
from zapstore.adapters.httpx_asset_downloader import HttpxAssetDownloader
from zapstore.adapters.json_state_store import JsonStateStore
from zapstore.adapters.platform_detector import OsPlatformDetector
from zapstore.adapters.websocket_relay import WebSocketRelayClient
from zapstore.domain.settings import ZapstoreSettings
from zapstore.usecases.legacy_migrator import LegacyMigrator
from zapstore.usecases.package_manager import PackageManager


def create_package_manager(
    settings: ZapstoreSettings,
    client: httpx.Client | None = None,
    connect: Callable[..., Any] | None = None,
) -> PackageManager:
    """Create a PackageManager backed by the relay, httpx, the JSON registry and the OS.

    Args:
        settings: Resolved settings.
        client: Optional shared httpx.Client for downloads. If not provided,
            each download opens its own client.
        connect: Optional websocket connection factory for relay queries.
            If not provided, the websockets sync client is used.

    Returns:
        A ready-to-use PackageManager.
    """
    return PackageManager(
        settings=settings,
        query=WebSocketRelayClient(timeout=settings.resolve_timeout, connect=connect),
        downloader=HttpxAssetDownloader(timeout=settings.download_timeout, client=client),
        state_store=JsonStateStore(settings.state_file),
        platform_detector=OsPlatformDetector(),
    )


def create_legacy_migrator(
    loader: EnvironmentSettingsLoader, settings: ZapstoreSettings
) -> LegacyMigrator:
    """Create the migrator for the loader's legacy directory and ``settings``."""
    return LegacyMigrator(
        legacy_dir=loader.legacy_dir(),
        data_dir=settings.data_dir,
        state_dir=settings.state_dir,
    )
