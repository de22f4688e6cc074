"""Installation pipeline use case.

Turns a resolved asset into a runnable installation under the data root::

    packages/<app id>/<version>/<binary>   the downloaded file
    bin/<binary>                           symlink to the active version
"""

from __future__ import annotations

import hashlib
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from zapstore.domain.exceptions import (
    FilesystemError,
    TransportError,
    VerificationError,
    ZapstoreError,
)

if TYPE_CHECKING:
    from zapstore.adapters.ports import AssetDownloaderPort

logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755


def binary_name_from_url(url: str) -> str:
    """Return the last path segment of ``url`` without its query string."""
    return url.split("/")[-1].split("?", 1)[0]


def link_points_into(target: str, app_id: str) -> bool:
    """Return True if a symlink target lies in ``packages/<app_id>/``.

    The app id must be the whole segment after ``packages``, so ``foo``
    does not claim ``../packages/barfoo/1.0/tool``.
    """
    parts = PurePosixPath(target.replace("\\", "/")).parts
    return any(
        part == "packages" and parts[i + 1] == app_id
        for i, part in enumerate(parts[:-1])
    )


def _check_segment(kind: str, value: str) -> None:
    if not value or value in (".", "..") or "/" in value or "\\" in value or "\x00" in value:
        raise ZapstoreError(f"{kind} is not a safe path component: {value!r}")


@dataclass(frozen=True)
class InstallRequest:
    """What to install.

    Attributes:
        app_id: Application identifier, the package directory name.
        version: Version string, the version directory name.
        url: Download URL.
        expected_hash: Expected sha256 hex digest; empty skips verification.
        filename: Suggested binary name; empty falls back to the URL.
    """

    app_id: str
    version: str
    url: str
    expected_hash: str = ""
    filename: str = ""

    @property
    def binary_name(self) -> str:
        """Binary name: the filename, else the URL's last segment, else the app id."""
        return self.filename or binary_name_from_url(self.url) or self.app_id


@dataclass(frozen=True)
class InstalledBinary:
    """Outcome of a successful install.

    Attributes:
        binary_path: Path of the placed binary.
        symlink_path: Path of the ``bin/`` symlink.
        binary_name: Name shared by the binary and its symlink.
        size_bytes: Size of the downloaded body.
        sha256: Hex digest of the downloaded body.
    """

    binary_path: Path
    symlink_path: Path
    binary_name: str
    size_bytes: int
    sha256: str


class InstallationPipeline:
    """Downloads, verifies, places and links binaries; removes installed apps.

    No rollback is attempted past a failed step except on hash mismatch,
    where the new version directory is removed. Leftover version directories
    are reclaimed by the garbage collector.
    """

    def __init__(
        self,
        downloader: AssetDownloaderPort,
        data_dir: Path,
        timeout: float | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            downloader: AssetDownloaderPort used to fetch binaries.
            data_dir: Root holding ``packages/`` and ``bin/``.
            timeout: Per-download timeout passed to the port.
        """
        self._downloader = downloader
        self._data_dir = Path(data_dir)
        self._timeout = timeout

    @property
    def packages_dir(self) -> Path:
        return self._data_dir / "packages"

    @property
    def bin_dir(self) -> Path:
        return self._data_dir / "bin"

    def install(self, request: InstallRequest) -> InstalledBinary:
        """Install one binary and point its symlink at it.

        Args:
            request: What to install.

        Returns:
            InstalledBinary describing the placed files.

        Raises:
            ZapstoreError: If the app id, version or binary name is unsafe.
            TransportError: If the download fails.
            VerificationError: If the body does not match the expected hash.
            FilesystemError: If creating, writing or linking fails.
        """
        binary_name = request.binary_name
        _check_segment("app id", request.app_id)
        _check_segment("version", request.version)
        _check_segment("binary name", binary_name)

        version_dir = self.packages_dir / request.app_id / request.version
        self._mkdir(version_dir)

        try:
            content = self._downloader.download(request.url, timeout=self._timeout)
        except ZapstoreError:
            raise
        except Exception as e:
            raise TransportError(
                f"downloading {request.app_id} {request.version} from {request.url}: {e}",
                url=request.url,
                original_error=e,
            ) from e

        digest = hashlib.sha256(content).hexdigest()
        if request.expected_hash:
            expected = request.expected_hash.lower()
            if digest != expected:
                shutil.rmtree(version_dir, ignore_errors=True)
                raise VerificationError(
                    f"hash mismatch: expected {expected}, got {digest}",
                    expected=expected,
                    actual=digest,
                )
            logger.debug("Hash verified for %s (sha256 %s)", binary_name, digest)

        binary_path = version_dir / binary_name
        try:
            binary_path.write_bytes(content)
            binary_path.chmod(EXECUTABLE_MODE)
        except OSError as e:
            raise FilesystemError(
                f"writing binary {binary_path}: {e}", path=str(binary_path), original_error=e
            ) from e

        symlink_path = self._link(request.app_id, request.version, binary_name)
        self._prune_other_versions(request.app_id, request.version)

        logger.info("Installed %s %s as %s", request.app_id, request.version, binary_name)
        return InstalledBinary(
            binary_path=binary_path,
            symlink_path=symlink_path,
            binary_name=binary_name,
            size_bytes=len(content),
            sha256=digest,
        )

    def uninstall(self, app_id: str, executables: list[str] | tuple[str, ...]) -> None:
        """Remove every version of an app and the symlinks that point into it.

        A ``bin/`` entry is removed only when it is a symlink whose target
        names the app's package directory; links re-pointed at another app
        are left alone.

        Raises:
            FilesystemError: If the package directory cannot be removed.
        """
        _check_segment("app id", app_id)
        app_dir = self.packages_dir / app_id
        if app_dir.exists():
            try:
                shutil.rmtree(app_dir)
            except OSError as e:
                raise FilesystemError(
                    f"removing {app_dir}: {e}", path=str(app_dir), original_error=e
                ) from e

        for name in executables:
            link = self.bin_dir / name
            try:
                target = os.readlink(link)
            except OSError:
                continue
            if not link_points_into(target, app_id):
                logger.debug("Leaving %s, it points at %s", link, target)
                continue
            try:
                link.unlink(missing_ok=True)
            except OSError as e:
                raise FilesystemError(
                    f"removing symlink {link}: {e}", path=str(link), original_error=e
                ) from e

        logger.info("Uninstalled %s", app_id)

    def _mkdir(self, path: Path) -> None:
        try:
            path.mkdir(mode=EXECUTABLE_MODE, parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(
                f"creating {path}: {e}", path=str(path), original_error=e
            ) from e

    def _link(self, app_id: str, version: str, binary_name: str) -> Path:
        """Point ``bin/<binary>`` at the version path with a relative target."""
        self._mkdir(self.bin_dir)
        symlink_path = self.bin_dir / binary_name
        target = os.path.join("..", "packages", app_id, version, binary_name)
        try:
            if symlink_path.is_symlink() or symlink_path.exists():
                symlink_path.unlink()
            os.symlink(target, symlink_path)
        except OSError as e:
            raise FilesystemError(
                f"creating symlink {symlink_path}: {e}",
                path=str(symlink_path),
                original_error=e,
            ) from e
        return symlink_path

    def _prune_other_versions(self, app_id: str, keep: str) -> None:
        app_dir = self.packages_dir / app_id
        for entry in app_dir.iterdir():
            if entry.is_dir() and not entry.is_symlink() and entry.name != keep:
                logger.debug("Removing previous version %s", entry)
                try:
                    shutil.rmtree(entry)
                except OSError as e:
                    logger.warning("Could not remove %s: %s", entry, e)
