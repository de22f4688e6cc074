"""Port interfaces for the zapstore core package.

Ports define the contracts that adapters must implement.
These are Protocol classes (structural subtyping) for flexible testing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from zapstore.domain.events import Event, EventFilter
    from zapstore.domain.package_state import PackageState
    from zapstore.domain.platform import PlatformTag


@runtime_checkable
class EventQueryPort(Protocol):
    """Port interface for querying a relay for events.

    Contract:
        - query_events() returns every stored event matching the filter,
          in relay order, honoring the filter's limit
        - Returns an empty list when nothing matches (never None)
        - Raises the transport library's errors on network or protocol failure
    """

    def query_events(
        self,
        endpoint: str,
        event_filter: EventFilter,
        timeout: float | None = None,
    ) -> list[Event]:
        """Run one filter against a relay.

        Args:
            endpoint: Relay URL.
            event_filter: Filter to run.
            timeout: Optional per-query timeout in seconds.

        Returns:
            Matching events.
        """
        ...


@runtime_checkable
class AssetDownloaderPort(Protocol):
    """Port interface for fetching a binary body.

    Contract:
        - download() returns the complete response body or raises
        - No partial bodies are ever returned
    """

    def download(self, url: str, timeout: float | None = None) -> bytes:
        """Fetch the full body at ``url``."""
        ...


@runtime_checkable
class PackageStatePort(Protocol):
    """Port interface for loading and saving the installed package registry.

    Contract:
        - load() returns an empty state when no registry exists yet
        - load() raises StateCorruptionError when the registry is unreadable
        - save() writes the whole registry, creating parent directories
    """

    def load(self) -> PackageState:
        ...

    def save(self, state: PackageState) -> None:
        ...


@runtime_checkable
class PlatformDetectorPort(Protocol):
    """Port interface for detecting the running platform."""

    def detect(self) -> PlatformTag:
        """Return the platform tag of the running machine."""
        ...
