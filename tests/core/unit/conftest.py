"""Shared fixtures for zapstore core unit tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from zapstore.adapters.fakes import (
    FakeAssetDownloader,
    FakeEventQuery,
    FakePlatformDetector,
    FakeStateStore,
)
from zapstore.domain.platform import PlatformTag, detect
from zapstore.domain.settings import ZapstoreSettings

RELAY_URL = "wss://relay.test"


@pytest.fixture
def linux_platform() -> PlatformTag:
    """Platform tag of a 64-bit Linux machine."""
    return detect("linux", "x86_64")


@pytest.fixture
def relay() -> FakeEventQuery:
    """Empty in-memory relay."""
    return FakeEventQuery()


@pytest.fixture
def downloader() -> FakeAssetDownloader:
    return FakeAssetDownloader()


@pytest.fixture
def state_store() -> FakeStateStore:
    return FakeStateStore()


@pytest.fixture
def platform_detector(linux_platform: PlatformTag) -> FakePlatformDetector:
    return FakePlatformDetector(linux_platform)


@pytest.fixture
def settings(tmp_path: Path) -> ZapstoreSettings:
    """Settings rooted in a temporary directory."""
    return ZapstoreSettings(
        data_dir=tmp_path / "data",
        state_dir=tmp_path / "state",
        relay_url=RELAY_URL,
    )
