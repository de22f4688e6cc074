"""Shared fixtures for CLI tests."""

from __future__ import annotations

import io
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
from zapstore_cli.output import Output


class CapturedOutput(Output):
    """Plain-text Output writing to in-memory buffers."""

    def __init__(self) -> None:
        super().__init__(stdout=io.StringIO(), stderr=io.StringIO(), no_color=True)

    @property
    def out(self) -> str:
        return self.stdout.getvalue()

    @property
    def err(self) -> str:
        return self.stderr.getvalue()


@pytest.fixture
def output() -> CapturedOutput:
    return CapturedOutput()


@pytest.fixture
def relay() -> FakeEventQuery:
    return FakeEventQuery()


@pytest.fixture
def downloader() -> FakeAssetDownloader:
    return FakeAssetDownloader()


@pytest.fixture
def state_store() -> FakeStateStore:
    return FakeStateStore()


@pytest.fixture
def settings(tmp_path: Path) -> ZapstoreSettings:
    return ZapstoreSettings(data_dir=tmp_path / "data", state_dir=tmp_path / "state")


@pytest.fixture
def manager(
    settings: ZapstoreSettings,
    relay: FakeEventQuery,
    downloader: FakeAssetDownloader,
    state_store: FakeStateStore,
) -> PackageManager:
    """PackageManager over fakes on a Linux x86_64 machine."""
    return PackageManager(
        settings,
        relay,
        downloader,
        state_store,
        FakePlatformDetector.from_names("linux", "x86_64"),
    )


@pytest.fixture
def publish(relay: FakeEventQuery, downloader: FakeAssetDownloader):
    """Publish an app release with a Linux asset served by the downloader."""

    def _publish(app_id: str, version: str, content: bytes = b"binary", **app: str) -> None:
        url = f"https://cdn.test/{app_id}/{version}/{app_id}"
        downloader.set_response(url, content)
        asset = relay.publish_asset(content, url=url)
        relay.publish_app(app_id, **app)
        relay.publish_release(app_id, version, asset_ids=(asset.id,))

    return _publish
