"""Shared fixtures for BDD tests."""

from pathlib import Path

import pytest

from zapstore.adapters.fakes import (
    FakeAssetDownloader,
    FakeEventQuery,
    FakePlatformDetector,
    FakeStateStore,
)
from zapstore.domain.settings import ZapstoreSettings
from zapstore.usecases.package_manager import PackageManager


@pytest.fixture
def context():
    """Shared context for passing state between steps."""
    return {}


@pytest.fixture
def relay() -> FakeEventQuery:
    """Relay holding the events published by Given steps."""
    return FakeEventQuery()


@pytest.fixture
def downloader() -> FakeAssetDownloader:
    """Blob host serving bodies registered by Given steps."""
    return FakeAssetDownloader()


@pytest.fixture
def state_store() -> FakeStateStore:
    return FakeStateStore()


@pytest.fixture
def settings(tmp_path: Path) -> ZapstoreSettings:
    """Settings rooted in a temporary directory.

    Returns:
        ZapstoreSettings with data and state under tmp_path.
    """
    return ZapstoreSettings(data_dir=tmp_path / "data", state_dir=tmp_path / "state")


@pytest.fixture
def manager(
    settings: ZapstoreSettings,
    relay: FakeEventQuery,
    downloader: FakeAssetDownloader,
    state_store: FakeStateStore,
) -> PackageManager:
    """PackageManager on a Linux x86_64 machine, backed by fakes."""
    return PackageManager(
        settings,
        relay,
        downloader,
        state_store,
        FakePlatformDetector.from_names("linux", "x86_64"),
    )
