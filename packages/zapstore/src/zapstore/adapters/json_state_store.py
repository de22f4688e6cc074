"""JSON file implementation of the PackageStatePort."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from zapstore.adapters.ports import PackageStatePort
from zapstore.domain.exceptions import FilesystemError, StateCorruptionError, ZapstoreError
from zapstore.domain.package_state import PackageState

logger = logging.getLogger(__name__)


class JsonStateStore:
    """Reads and writes the registry as a single indented JSON file.

    Registry format::

        {
          "packages": {
            "<app id>": {
              "pubkey": "...",
              "version": "1.2.3",
              "installed_at": "2025-01-01T00:00:00Z",
              "executables": ["tool"],
              "asset_event_id": "..."
            }
          }
        }
    """

    def __init__(self, path: Path) -> None:
        """Initialize with the registry file path.

        Args:
            path: Location of ``state.json``. Parent directories are created
                on save.
        """
        self.path = Path(path)

    def load(self) -> PackageState:
        """Load the registry, or an empty one if the file does not exist.

        Raises:
            StateCorruptionError: If the file exists but is not a valid registry.
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No registry at %s, starting empty", self.path)
            return PackageState()
        except OSError as e:
            raise StateCorruptionError(
                f"Cannot read registry {self.path}: {e}", path=str(self.path)
            ) from e

        try:
            data = json.loads(text)
            state = PackageState.from_dict(data)
        except (ValueError, ZapstoreError) as e:
            raise StateCorruptionError(
                f"Cannot parse registry {self.path}: {e}", path=str(self.path)
            ) from e

        logger.debug("Loaded %d package(s) from %s", len(state), self.path)
        return state

    def save(self, state: PackageState) -> None:
        """Write the whole registry, replacing the previous file.

        Raises:
            FilesystemError: If the directory or file cannot be written.
        """
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(state.to_dict(), indent=2) + "\n", encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise FilesystemError(
                f"Cannot write registry {self.path}: {e}",
                path=str(self.path),
                original_error=e,
            ) from e
        logger.debug("Saved %d package(s) to %s", len(state), self.path)


# Runtime protocol check
assert isinstance(JsonStateStore(Path("/nonexistent/state.json")), PackageStatePort)
