"""Descriptors parsed from app, release and asset events."""

from __future__ import annotations

from dataclasses import dataclass

from zapstore.domain.events import Event
from zapstore.domain.version import VersionValue

DEFAULT_BLOB_STORE_URL = "https://cdn.zapstore.dev/"


@dataclass(frozen=True)
class AppDescriptor:
    """Application metadata from an app event.

    The owning public key authenticates every release of the app.

    Attributes:
        app_id: Stable identifier (``d`` tag), used as the registry key.
        name: Display name, falls back to ``app_id``.
        summary: Free-text summary.
        pubkey: Owning public key (event author).
        event: Source event.
    """

    app_id: str
    name: str
    summary: str
    pubkey: str
    event: Event | None = None

    @classmethod
    def from_event(cls, event: Event) -> AppDescriptor:
        app_id = event.tag_value("d")
        return cls(
            app_id=app_id,
            name=event.tag_value("name") or app_id,
            summary=event.tag_value("summary"),
            pubkey=event.pubkey,
            event=event,
        )


def extract_version(event: Event) -> str:
    """Return a release event's version string, or "" if it has none.

    A ``version`` tag wins; otherwise the ``d`` tag is used with a leading
    ``@`` removed.
    """
    version = event.tag_value("version")
    if version:
        return version
    return event.tag_value("d").removeprefix("@")


@dataclass(frozen=True)
class ReleaseDescriptor:
    """Release metadata.

    Attributes:
        version: Parsed version; ``version.original`` is the published string.
        asset_refs: Asset event identifiers from ``e`` tags, in tag order.
        event: Source event.
    """

    version: VersionValue
    asset_refs: tuple[str, ...]
    event: Event | None = None

    @classmethod
    def from_event(cls, event: Event) -> ReleaseDescriptor | None:
        """Parse a release event, returning None if it carries no version."""
        version = extract_version(event)
        if not version:
            return None
        return cls(
            version=VersionValue.parse(version),
            asset_refs=tuple(event.tag_values("e")),
            event=event,
        )

    @property
    def version_string(self) -> str:
        return self.version.original


@dataclass(frozen=True)
class AssetDescriptor:
    """Downloadable binary metadata.

    Attributes:
        url: Download URL.
        hash: Expected sha256 digest (hex), may be empty.
        platform: Declared ``f`` tag.
        mime: Declared ``m`` tag.
        filename: Suggested filename, may be empty.
        event: Source event.
    """

    url: str
    hash: str
    platform: str
    mime: str
    filename: str
    event: Event | None = None

    @classmethod
    def from_event(
        cls, event: Event, blob_store_url: str = DEFAULT_BLOB_STORE_URL
    ) -> AssetDescriptor:
        """Parse an asset event.

        The URL comes from the ``url`` tag, else the blob store address for
        the content hash, else the first tag value starting with ``http``.
        """
        url = event.tag_value("url")
        digest = event.tag_value("x")

        if not url and digest:
            url = blob_store_url.rstrip("/") + "/" + digest

        if not url:
            for tag in event.tags:
                if len(tag) >= 2 and tag[1].startswith("http"):
                    url = tag[1]
                    break

        return cls(
            url=url,
            hash=digest,
            platform=event.tag_value("f"),
            mime=event.tag_value("m"),
            filename=event.tag_value("filename"),
            event=event,
        )

    @property
    def event_id(self) -> str:
        return self.event.id if self.event is not None else ""


@dataclass(frozen=True)
class ResolvedPackage:
    """Result of a successful resolution: the (app, release, asset) triple."""

    app: AppDescriptor
    release: ReleaseDescriptor
    asset: AssetDescriptor
