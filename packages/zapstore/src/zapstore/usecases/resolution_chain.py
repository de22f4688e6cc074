"""Resolution chain use case: app -> latest release -> platform asset."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from zapstore.domain.descriptors import (
    DEFAULT_BLOB_STORE_URL,
    AppDescriptor,
    AssetDescriptor,
    ReleaseDescriptor,
    ResolvedPackage,
)
from zapstore.domain.events import KIND_APP, KIND_RELEASE, Event, EventFilter
from zapstore.domain.exceptions import NotFoundError, TransportError, ZapstoreError

if TYPE_CHECKING:
    from zapstore.adapters.ports import EventQueryPort
    from zapstore.domain.platform import PlatformTag

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 20


class ResolutionChain:
    """Selects the newest compatible release and asset for an app.

    Resolution runs three queries in order. Each stage depends on the
    previous one's output and raises NotFoundError when it matches nothing;
    no stage is retried with relaxed filters.

    1. App: the app event with ``d`` equal to the app id and an ``f`` tag for
       the platform. Its author becomes the owner key.
    2. Release: every release by the owner whose ``i`` tag names the app;
       the one with the highest version wins, the first seen on ties.
    3. Asset: the release's ``e`` references for the platform, accepted by
       exact ``f`` tag or, failing that, by compatible ``m`` MIME type.
    """

    def __init__(
        self,
        query: EventQueryPort,
        relay_url: str,
        blob_store_url: str = DEFAULT_BLOB_STORE_URL,
        timeout: float | None = None,
    ) -> None:
        """Initialize the resolution chain.

        Args:
            query: EventQueryPort implementation used for every stage.
            relay_url: Relay endpoint passed to the port.
            blob_store_url: Base URL used when an asset only carries a hash.
            timeout: Per-query timeout passed to the port.
        """
        self._query = query
        self._relay_url = relay_url
        self._blob_store_url = blob_store_url
        self._timeout = timeout

    def _run(self, event_filter: EventFilter, context: str) -> list[Event]:
        """Run a query, translating transport failures into TransportError."""
        try:
            return self._query.query_events(
                self._relay_url, event_filter, timeout=self._timeout
            )
        except TransportError as e:
            raise TransportError(
                f"{context}: {e.message}",
                url=e.url or self._relay_url,
                original_error=e.original_error or e,
            ) from e
        except ZapstoreError:
            raise
        except Exception as e:
            raise TransportError(
                f"{context}: {e}", url=self._relay_url, original_error=e
            ) from e

    def resolve_app(self, app_id: str, platform: PlatformTag) -> AppDescriptor:
        """Find the app event for ``app_id`` on ``platform``.

        Raises:
            NotFoundError: If the relay holds no such app for the platform.
            TransportError: If the query fails.
        """
        event_filter = EventFilter(
            kinds=(KIND_APP,),
            tags={"d": (app_id,), "f": (platform.tag,)},
            limit=1,
        )
        events = self._run(event_filter, f"querying app {app_id!r}")
        if not events:
            raise NotFoundError(
                f"app {app_id!r} not found on relay", stage="app", app_id=app_id
            )

        app = AppDescriptor.from_event(events[0])
        logger.debug("Resolved app %s owned by %s", app.app_id, app.pubkey)
        return app

    def resolve_latest_release(self, app: AppDescriptor) -> ReleaseDescriptor:
        """Pick the highest-versioned release published by the app's owner.

        Releases without a version are skipped. Among equal versions the
        first event returned by the relay is kept.

        Raises:
            NotFoundError: If no releases, or no versioned releases, exist.
            TransportError: If the query fails.
        """
        event_filter = EventFilter(
            kinds=(KIND_RELEASE,),
            authors=(app.pubkey,),
            tags={"i": (app.app_id,)},
        )
        events = self._run(event_filter, f"querying releases of {app.app_id!r}")
        if not events:
            raise NotFoundError(
                f"no releases found for {app.app_id!r}",
                stage="release",
                app_id=app.app_id,
            )

        best: ReleaseDescriptor | None = None
        for event in events:
            candidate = ReleaseDescriptor.from_event(event)
            if candidate is None:
                logger.debug("Ignoring unversioned release event %s", event.id)
                continue
            if best is None or candidate.version > best.version:
                best = candidate

        if best is None:
            raise NotFoundError(
                f"no versioned releases found for {app.app_id!r}",
                stage="release",
                app_id=app.app_id,
            )

        logger.debug("Latest release of %s is %s", app.app_id, best.version_string)
        return best

    def resolve_asset(
        self,
        release: ReleaseDescriptor,
        platform: PlatformTag,
        app_id: str | None = None,
    ) -> AssetDescriptor:
        """Return the first referenced asset compatible with ``platform``.

        Raises:
            NotFoundError: If the release references no assets or none match.
            TransportError: If the query fails.
        """
        if not release.asset_refs:
            raise NotFoundError(
                "release has no asset references", stage="asset", app_id=app_id
            )

        event_filter = EventFilter(
            ids=release.asset_refs,
            tags={"f": (platform.tag,)},
        )
        events = self._run(
            event_filter, f"querying assets of release {release.version_string!r}"
        )

        for event in events:
            platform_value = event.tag_value("f")
            mime = event.tag_value("m")
            if platform_value and platform.matches_platform(platform_value):
                return AssetDescriptor.from_event(event, self._blob_store_url)
            if mime and platform.matches_mime(mime):
                return AssetDescriptor.from_event(event, self._blob_store_url)
            logger.debug("Asset %s does not match platform %s", event.id, platform.tag)

        raise NotFoundError(
            f"no assets found for platform {platform.tag}",
            stage="asset",
            app_id=app_id,
        )

    def resolve(self, app_id: str, platform: PlatformTag) -> ResolvedPackage:
        """Run the full chain for ``app_id`` on ``platform``.

        Returns:
            ResolvedPackage with the app, its latest release and the asset.

        Raises:
            NotFoundError: At whichever stage matched nothing.
            TransportError: If any query fails.
        """
        app = self.resolve_app(app_id, platform)
        release = self.resolve_latest_release(app)
        asset = self.resolve_asset(release, platform, app_id=app_id)
        logger.info(
            "Resolved %s %s for %s", app_id, release.version_string, platform.tag
        )
        return ResolvedPackage(app=app, release=release, asset=asset)

    def search(
        self,
        query: str,
        platform: PlatformTag,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> list[AppDescriptor]:
        """Search apps available on ``platform``.

        Raises:
            TransportError: If the query fails.
        """
        event_filter = EventFilter(
            kinds=(KIND_APP,),
            tags={"f": (platform.tag,)},
            search=query,
            limit=limit,
        )
        events = self._run(event_filter, f"searching for {query!r}")
        return [AppDescriptor.from_event(event) for event in events]
