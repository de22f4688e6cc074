"""Use cases: Application logic layer."""

from zapstore.usecases.config_parser import ConfigParser
from zapstore.usecases.garbage_collector import CleanupResult, GarbageCollector
from zapstore.usecases.installation_pipeline import (
    InstallationPipeline,
    InstalledBinary,
    InstallRequest,
)
from zapstore.usecases.legacy_migrator import LegacyMigrator
from zapstore.usecases.package_manager import (
    InstallOutcome,
    InstallStatus,
    PackageManager,
    UpdateItem,
    UpdateReport,
    UpdateStatus,
)
from zapstore.usecases.resolution_chain import ResolutionChain

__all__ = [
    "ConfigParser",
    "CleanupResult",
    "GarbageCollector",
    "InstallationPipeline",
    "InstalledBinary",
    "InstallRequest",
    "LegacyMigrator",
    "InstallOutcome",
    "InstallStatus",
    "PackageManager",
    "UpdateItem",
    "UpdateReport",
    "UpdateStatus",
    "ResolutionChain",
]
