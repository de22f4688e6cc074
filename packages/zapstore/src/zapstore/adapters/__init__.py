"""Interface adapters: relay and download transports, registry file, platform detection."""

from zapstore.adapters.ports import (
    AssetDownloaderPort,
    EventQueryPort,
    PackageStatePort,
    PlatformDetectorPort,
)
from zapstore.adapters.httpx_asset_downloader import HttpxAssetDownloader
from zapstore.adapters.json_state_store import JsonStateStore
from zapstore.adapters.platform_detector import OsPlatformDetector
from zapstore.adapters.websocket_relay import WebSocketRelayClient

__all__ = [
    "AssetDownloaderPort",
    "EventQueryPort",
    "PackageStatePort",
    "PlatformDetectorPort",
    "HttpxAssetDownloader",
    "JsonStateStore",
    "OsPlatformDetector",
    "WebSocketRelayClient",
]
