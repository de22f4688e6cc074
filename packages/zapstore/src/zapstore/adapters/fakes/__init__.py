"""Fake adapters for testing.

This module provides test doubles for port interfaces, enabling
deterministic testing without network or registry I/O.
"""

from zapstore.adapters.fakes.fake_asset_downloader import FakeAssetDownloader
from zapstore.adapters.fakes.fake_event_query import FakeEventQuery
from zapstore.adapters.fakes.fake_platform_detector import FakePlatformDetector
from zapstore.adapters.fakes.fake_state_store import FakeStateStore

__all__ = [
    "FakeAssetDownloader",
    "FakeEventQuery",
    "FakePlatformDetector",
    "FakeStateStore",
]
