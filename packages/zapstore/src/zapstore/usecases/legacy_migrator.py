"""One-time migration from the legacy ``~/.zapstore`` layout."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from zapstore.domain.settings import STATE_FILE_NAME

logger = logging.getLogger(__name__)


class LegacyMigrator:
    """Moves a legacy ``~/.zapstore`` directory into the XDG data/state layout.

    The registry file moves to the state directory and the rest of the
    legacy directory (``packages/``, ``bin/``) becomes the data directory.
    Nothing happens if there is no legacy directory or the data directory
    already exists.
    """

    def __init__(self, legacy_dir: Path, data_dir: Path, state_dir: Path) -> None:
        self._legacy_dir = Path(legacy_dir)
        self._data_dir = Path(data_dir)
        self._state_dir = Path(state_dir)

    def needs_migration(self) -> bool:
        return self._legacy_dir.is_dir() and not self._data_dir.exists()

    def migrate(self) -> bool:
        """Run the migration if needed.

        Returns:
            True if a migration was performed.

        Raises:
            OSError: If a directory cannot be created or a rename fails.
        """
        if not self.needs_migration():
            return False

        self._data_dir.parent.mkdir(mode=0o755, parents=True, exist_ok=True)
        self._state_dir.mkdir(mode=0o755, parents=True, exist_ok=True)

        old_state = self._legacy_dir / STATE_FILE_NAME
        if old_state.is_file():
            os.replace(old_state, self._state_dir / STATE_FILE_NAME)

        os.rename(self._legacy_dir, self._data_dir)
        logger.info("Migrated %s to %s", self._legacy_dir, self._data_dir)
        return True
