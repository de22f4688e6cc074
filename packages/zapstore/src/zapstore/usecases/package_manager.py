"""Package manager use case: install, update, remove, list, search, cleanup."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from zapstore.domain.exceptions import FilesystemError, NotInstalledError, ZapstoreError
from zapstore.domain.package_state import InstalledPackageRecord, PackageState
from zapstore.domain.version import can_upgrade
from zapstore.usecases.garbage_collector import CleanupResult, GarbageCollector
from zapstore.usecases.installation_pipeline import (
    InstallationPipeline,
    InstalledBinary,
    InstallRequest,
)
from zapstore.usecases.resolution_chain import ResolutionChain

if TYPE_CHECKING:
    from zapstore.adapters.ports import (
        AssetDownloaderPort,
        EventQueryPort,
        PackageStatePort,
        PlatformDetectorPort,
    )
    from zapstore.domain.descriptors import AppDescriptor, ResolvedPackage
    from zapstore.domain.platform import PlatformTag
    from zapstore.domain.settings import ZapstoreSettings

logger = logging.getLogger(__name__)


class InstallStatus(Enum):
    """Outcome of an install request.

    Attributes:
        INSTALLED: App was not installed before.
        UPGRADED: A newer version replaced the installed one.
        UP_TO_DATE: Installed version is not older than the latest release.
    """

    INSTALLED = "installed"
    UPGRADED = "upgraded"
    UP_TO_DATE = "up_to_date"


@dataclass(frozen=True)
class InstallOutcome:
    """Result of PackageManager.install().

    Attributes:
        status: What happened.
        resolved: The resolved app, release and asset.
        previous_version: Version installed before, if any.
        binary: Placed binary, None when already up to date.
    """

    status: InstallStatus
    resolved: ResolvedPackage
    previous_version: str | None = None
    binary: InstalledBinary | None = None


class UpdateStatus(Enum):
    UPDATED = "updated"
    UP_TO_DATE = "up_to_date"
    FAILED = "failed"


@dataclass(frozen=True)
class UpdateItem:
    """Per-app outcome of an update.

    Attributes:
        app_id: Application identifier.
        status: Updated, up to date, or failed.
        installed_version: Version installed before the update.
        latest_version: Latest resolved version, None if resolution failed.
        error: Error message for failures.
    """

    app_id: str
    status: UpdateStatus
    installed_version: str
    latest_version: str | None = None
    error: str | None = None

    @classmethod
    def create_updated(cls, app_id: str, installed: str, latest: str) -> UpdateItem:
        return cls(app_id, UpdateStatus.UPDATED, installed, latest)

    @classmethod
    def create_up_to_date(cls, app_id: str, installed: str, latest: str) -> UpdateItem:
        return cls(app_id, UpdateStatus.UP_TO_DATE, installed, latest)

    @classmethod
    def create_failure(
        cls, app_id: str, installed: str, error: str, latest: str | None = None
    ) -> UpdateItem:
        return cls(app_id, UpdateStatus.FAILED, installed, latest, error)


@dataclass(frozen=True)
class UpdateReport:
    """Outcome of an update run, one item per targeted app."""

    items: tuple[UpdateItem, ...] = ()

    @property
    def updated(self) -> list[UpdateItem]:
        return [i for i in self.items if i.status is UpdateStatus.UPDATED]

    @property
    def failed(self) -> list[UpdateItem]:
        return [i for i in self.items if i.status is UpdateStatus.FAILED]

    @property
    def ok(self) -> bool:
        """False if any app failed to resolve or install."""
        return not self.failed


class PackageManager:
    """Caller-level orchestration over resolution, installation and the registry.

    Every mutating operation loads the registry fresh and saves it in full.
    """

    def __init__(
        self,
        settings: ZapstoreSettings,
        query: EventQueryPort,
        downloader: AssetDownloaderPort,
        state_store: PackageStatePort,
        platform_detector: PlatformDetectorPort,
    ) -> None:
        """Initialize the package manager.

        Args:
            settings: Relay, directories and timeouts.
            query: EventQueryPort used for resolution and search.
            downloader: AssetDownloaderPort used by the installation pipeline.
            state_store: Registry persistence.
            platform_detector: Source of the running platform tag.
        """
        self._settings = settings
        self._query = query
        self._state_store = state_store
        self._platform_detector = platform_detector
        self._pipeline = InstallationPipeline(
            downloader, settings.data_dir, timeout=settings.download_timeout
        )
        self._platform: PlatformTag | None = None

    @property
    def platform(self) -> PlatformTag:
        """Platform tag, detected once per manager."""
        if self._platform is None:
            self._platform = self._platform_detector.detect()
        return self._platform

    def _save(self, state: PackageState) -> None:
        try:
            self._state_store.save(state)
        except ZapstoreError:
            raise
        except OSError as e:
            path = e.filename if e.filename is not None else self._settings.state_file
            raise FilesystemError(
                f"saving registry: {e}", path=str(path), original_error=e
            ) from e

    def _chain(self, timeout: float) -> ResolutionChain:
        return ResolutionChain(
            self._query,
            self._settings.relay_url,
            blob_store_url=self._settings.blob_store_url,
            timeout=timeout,
        )

    def _install_resolved(
        self, state: PackageState, resolved: ResolvedPackage
    ) -> InstalledBinary:
        """Run the pipeline for a resolved package and record it in ``state``."""
        app_id = resolved.app.app_id
        version = resolved.release.version_string
        binary = self._pipeline.install(
            InstallRequest(
                app_id=app_id,
                version=version,
                url=resolved.asset.url,
                expected_hash=resolved.asset.hash,
                filename=resolved.asset.filename,
            )
        )
        state.add(
            app_id,
            InstalledPackageRecord(
                pubkey=resolved.app.pubkey,
                version=version,
                executables=(binary.binary_name,),
                asset_event_id=resolved.asset.event_id,
            ),
        )
        return binary

    def install(self, app_id: str) -> InstallOutcome:
        """Resolve and install ``app_id``, skipping if already current.

        Raises:
            StateCorruptionError: If the registry cannot be read.
            NotFoundError: If resolution finds nothing.
            TransportError: If a query or the download fails.
            VerificationError: If the downloaded binary fails its hash check.
            FilesystemError: If placing the binary fails or the registry cannot
                be saved.
        """
        state = self._state_store.load()
        resolved = self._chain(self._settings.resolve_timeout).resolve(app_id, self.platform)
        latest = resolved.release.version_string

        existing = state.get(app_id)
        if existing is not None and not can_upgrade(existing.version, latest):
            logger.info("%s is up to date at %s", app_id, existing.version)
            return InstallOutcome(
                status=InstallStatus.UP_TO_DATE,
                resolved=resolved,
                previous_version=existing.version,
            )

        binary = self._install_resolved(state, resolved)
        self._save(state)

        return InstallOutcome(
            status=InstallStatus.UPGRADED if existing is not None else InstallStatus.INSTALLED,
            resolved=resolved,
            previous_version=existing.version if existing is not None else None,
            binary=binary,
        )

    def update(
        self,
        app_id: str | None = None,
        on_check: Callable[[str, str], None] | None = None,
    ) -> UpdateReport:
        """Update one installed app, or every installed app in id order.

        A failure for one app is recorded in the report and the sweep moves
        on to the next. The registry is saved once at the end.

        Args:
            app_id: App to update, or None for all installed apps.
            on_check: Called with (app id, installed version) before each app
                is checked.

        Returns:
            UpdateReport with one item per targeted app.

        Raises:
            NotInstalledError: If ``app_id`` is given but not installed.
            StateCorruptionError: If the registry cannot be read.
            FilesystemError: If the registry cannot be saved.
        """
        state = self._state_store.load()
        if app_id is not None:
            if app_id not in state:
                raise NotInstalledError(app_id)
            targets = [app_id]
        else:
            targets = sorted(state.packages)

        if not targets:
            return UpdateReport()

        chain = self._chain(self._settings.update_timeout)
        items: list[UpdateItem] = []
        changed = False

        for target in targets:
            record = state.get(target)
            assert record is not None
            if on_check is not None:
                on_check(target, record.version)

            try:
                resolved = chain.resolve(target, self.platform)
            except ZapstoreError as e:
                logger.warning("Could not resolve %s: %s", target, e)
                items.append(UpdateItem.create_failure(target, record.version, str(e)))
                continue

            latest = resolved.release.version_string
            if not can_upgrade(record.version, latest):
                items.append(UpdateItem.create_up_to_date(target, record.version, latest))
                continue

            try:
                self._install_resolved(state, resolved)
            except ZapstoreError as e:
                logger.warning("Could not install %s %s: %s", target, latest, e)
                items.append(
                    UpdateItem.create_failure(target, record.version, str(e), latest)
                )
                continue

            changed = True
            items.append(UpdateItem.create_updated(target, record.version, latest))

        if changed:
            self._save(state)

        return UpdateReport(items=tuple(items))

    def remove(self, app_id: str) -> InstalledPackageRecord:
        """Uninstall ``app_id`` and drop it from the registry.

        Returns:
            The record that was removed.

        Raises:
            NotInstalledError: If the app is not installed.
            FilesystemError: If its package directory cannot be removed
                or the registry cannot be saved.
        """
        state = self._state_store.load()
        record = state.get(app_id)
        if record is None:
            raise NotInstalledError(app_id)

        self._pipeline.uninstall(app_id, record.executables)
        state.remove(app_id)
        self._save(state)
        return record

    def list_installed(self) -> list[tuple[str, InstalledPackageRecord]]:
        """Return installed packages sorted by app id."""
        return self._state_store.load().sorted_items()

    def search(self, query: str) -> list[AppDescriptor]:
        """Search apps available for the running platform."""
        return self._chain(self._settings.search_timeout).search(query, self.platform)

    def cleanup(self) -> CleanupResult:
        """Remove inactive version directories and dangling symlinks."""
        return GarbageCollector(self._state_store, self._settings.data_dir).cleanup()
