"""Domain layer: Value objects and registry model with zero external dependencies."""

from zapstore.domain.descriptors import (
    AppDescriptor,
    AssetDescriptor,
    ReleaseDescriptor,
    ResolvedPackage,
)
from zapstore.domain.events import KIND_APP, KIND_ASSET, KIND_RELEASE, Event, EventFilter
from zapstore.domain.exceptions import (
    ConfigError,
    FilesystemError,
    NotFoundError,
    NotInstalledError,
    StateCorruptionError,
    TransportError,
    VerificationError,
    ZapstoreError,
)
from zapstore.domain.package_state import InstalledPackageRecord, PackageState
from zapstore.domain.platform import PlatformTag
from zapstore.domain.settings import ZapstoreSettings
from zapstore.domain.version import Ordering, VersionValue

__all__ = [
    "AppDescriptor",
    "AssetDescriptor",
    "ReleaseDescriptor",
    "ResolvedPackage",
    "Event",
    "EventFilter",
    "KIND_APP",
    "KIND_RELEASE",
    "KIND_ASSET",
    "ZapstoreError",
    "ConfigError",
    "NotFoundError",
    "VerificationError",
    "TransportError",
    "StateCorruptionError",
    "FilesystemError",
    "NotInstalledError",
    "InstalledPackageRecord",
    "PackageState",
    "PlatformTag",
    "ZapstoreSettings",
    "Ordering",
    "VersionValue",
]
