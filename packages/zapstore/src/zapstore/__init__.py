"""zapstore-py: Resolve, verify and install apps published to relay directories."""

__version__ = "0.1.0"

from zapstore.domain.exceptions import ZapstoreError
from zapstore.domain.settings import ZapstoreSettings
from zapstore.domain.version import can_upgrade, compare
from zapstore.usecases.package_manager import PackageManager
from zapstore.usecases.resolution_chain import ResolutionChain

__all__ = [
    "ZapstoreError",
    "ZapstoreSettings",
    "can_upgrade",
    "compare",
    "PackageManager",
    "ResolutionChain",
]
