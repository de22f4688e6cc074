"""Installed package registry.

The registry is the full set of installed package records keyed by app
identifier. It is loaded fresh and written back in full by every mutating
operation.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from zapstore.domain.exceptions import ZapstoreError


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as RFC 3339 UTC with second precision."""
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class InstalledPackageRecord:
    """One installed app.

    Attributes:
        pubkey: Owner public key the app was resolved under.
        version: Installed version string, also the version directory name.
        installed_at: RFC 3339 UTC install time; empty until added to a state.
        executables: Names of the ``bin/`` symlinks this app provides.
        asset_event_id: Identifier of the asset event the binary came from.
    """

    pubkey: str
    version: str
    installed_at: str = ""
    executables: tuple[str, ...] = ()
    asset_event_id: str = ""

    def __post_init__(self) -> None:
        """Validate record configuration."""
        self._validate_version()

    def _validate_version(self) -> None:
        """Validate version is a usable directory name."""
        if not self.version:
            raise ZapstoreError("version cannot be empty")
        if "/" in self.version or "\\" in self.version or self.version in (".", ".."):
            raise ZapstoreError(f"version is not a valid directory name: {self.version!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "pubkey": self.pubkey,
            "version": self.version,
            "installed_at": self.installed_at,
            "executables": list(self.executables),
            "asset_event_id": self.asset_event_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InstalledPackageRecord:
        """Build a record from its registry entry.

        Raises:
            ZapstoreError: If ``executables`` is not a list of strings.
        """
        executables = data.get("executables")
        if executables is None:
            executables = []
        if not isinstance(executables, list) or not all(
            isinstance(name, str) for name in executables
        ):
            raise ZapstoreError(f"executables must be a list of names: {executables!r}")
        return cls(
            pubkey=str(data.get("pubkey", "")),
            version=str(data["version"]),
            installed_at=str(data.get("installed_at", "")),
            executables=tuple(executables),
            asset_event_id=str(data.get("asset_event_id", "")),
        )


@dataclass
class PackageState:
    """Mutable registry of installed packages keyed by app identifier."""

    packages: dict[str, InstalledPackageRecord] = field(default_factory=dict)

    def add(
        self,
        app_id: str,
        record: InstalledPackageRecord,
        now: datetime | None = None,
    ) -> InstalledPackageRecord:
        """Record an installed package, overwriting any previous record.

        Stamps ``installed_at`` with ``now`` (default: current UTC time) when
        the record has none.

        Returns:
            The record as stored.
        """
        if not record.installed_at:
            moment = now if now is not None else datetime.now(timezone.utc)
            record = replace(record, installed_at=format_timestamp(moment))
        self.packages[app_id] = record
        return record

    def remove(self, app_id: str) -> None:
        self.packages.pop(app_id, None)

    def get(self, app_id: str) -> InstalledPackageRecord | None:
        return self.packages.get(app_id)

    def __contains__(self, app_id: object) -> bool:
        return app_id in self.packages

    def __len__(self) -> int:
        return len(self.packages)

    def sorted_items(self) -> list[tuple[str, InstalledPackageRecord]]:
        return sorted(self.packages.items())

    def to_dict(self) -> dict[str, Any]:
        return {
            "packages": {
                app_id: record.to_dict() for app_id, record in self.packages.items()
            }
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PackageState:
        """Build a state from the registry's JSON object.

        Raises:
            ZapstoreError: If the object does not have the registry shape.
        """
        if not isinstance(data, dict):
            raise ZapstoreError("registry must be a JSON object")
        raw = data.get("packages") or {}
        if not isinstance(raw, dict):
            raise ZapstoreError("registry 'packages' must be an object")
        try:
            packages = {
                str(app_id): InstalledPackageRecord.from_dict(entry)
                for app_id, entry in raw.items()
            }
        except (KeyError, TypeError, AttributeError) as e:
            raise ZapstoreError(f"invalid package record: {e}") from e
        return cls(packages=packages)
