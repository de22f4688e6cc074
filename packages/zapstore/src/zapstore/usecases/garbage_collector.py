"""Garbage collector use case for the installed package tree."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from zapstore.domain.exceptions import FilesystemError

if TYPE_CHECKING:
    from zapstore.adapters.ports import PackageStatePort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanupResult:
    """Outcome of a cleanup run.

    Attributes:
        removed: Number of version directories removed.
        bytes_freed: Total size of the files in those directories.
        dangling_links: Number of ``bin/`` symlinks removed.
    """

    removed: int = 0
    bytes_freed: int = 0
    dangling_links: int = 0


def directory_size(path: Path) -> int:
    """Sum the sizes of regular files under ``path`` without following links."""
    total = 0
    for root, _dirs, files in os.walk(path):
        for name in files:
            try:
                total += os.lstat(os.path.join(root, name)).st_size
            except OSError:
                continue
    return total


class GarbageCollector:
    """Reconciles the package tree against the registry.

    Every version directory other than the app's registered version is
    removed; an app missing from the registry loses all its versions and,
    once empty, its directory. Symlinks in ``bin/`` whose target no longer
    exists are removed afterwards. Running it twice in a row removes nothing
    the second time.
    """

    def __init__(self, state_store: PackageStatePort, data_dir: Path) -> None:
        """Initialize the collector.

        Args:
            state_store: Registry source for active versions.
            data_dir: Root holding ``packages/`` and ``bin/``.
        """
        self._state_store = state_store
        self._data_dir = Path(data_dir)

    def __call__(self) -> CleanupResult:
        return self.cleanup()

    def cleanup(self) -> CleanupResult:
        """Remove inactive version directories and dangling symlinks.

        Without a ``packages/`` tree only the ``bin/`` sweep runs.

        Returns:
            CleanupResult with counts.

        Raises:
            StateCorruptionError: If the registry cannot be read.
            FilesystemError: If an emptied app directory cannot be removed.
        """
        packages_dir = self._data_dir / "packages"
        removed, bytes_freed = 0, 0
        if packages_dir.is_dir():
            removed, bytes_freed = self._sweep_packages(packages_dir)

        dangling = self._remove_dangling_links()
        logger.info(
            "Cleanup removed %d version(s), freed %d bytes, dropped %d link(s)",
            removed,
            bytes_freed,
            dangling,
        )
        return CleanupResult(removed=removed, bytes_freed=bytes_freed, dangling_links=dangling)

    def _sweep_packages(self, packages_dir: Path) -> tuple[int, int]:
        state = self._state_store.load()
        removed = 0
        bytes_freed = 0

        for app_dir in sorted(packages_dir.iterdir()):
            if not app_dir.is_dir() or app_dir.is_symlink():
                continue

            record = state.get(app_dir.name)
            active = record.version if record is not None else ""

            for version_dir in sorted(app_dir.iterdir()):
                if not version_dir.is_dir() or version_dir.name == active:
                    continue
                size = directory_size(version_dir)
                try:
                    if version_dir.is_symlink():
                        version_dir.unlink()
                    else:
                        shutil.rmtree(version_dir)
                except OSError as e:
                    logger.warning("Could not remove %s: %s", version_dir, e)
                    continue
                logger.debug("Removed %s (%d bytes)", version_dir, size)
                removed += 1
                bytes_freed += size

            if not active and not any(app_dir.iterdir()):
                logger.debug("Removing orphaned app directory %s", app_dir)
                try:
                    app_dir.rmdir()
                except OSError as e:
                    raise FilesystemError(
                        f"removing {app_dir}: {e}", path=str(app_dir), original_error=e
                    ) from e

        return removed, bytes_freed

    def _remove_dangling_links(self) -> int:
        bin_dir = self._data_dir / "bin"
        if not bin_dir.is_dir():
            return 0

        count = 0
        for link in sorted(bin_dir.iterdir()):
            if not link.is_symlink():
                continue
            target = bin_dir / os.readlink(link)
            if os.path.exists(target):
                continue
            try:
                link.unlink()
            except OSError as e:
                logger.warning("Could not remove dangling link %s: %s", link, e)
                continue
            logger.debug("Removed dangling link %s", link)
            count += 1
        return count
