"""Fake relay for testing.

Provides an in-memory EventQueryPort that evaluates filters against a set of
stored events, so resolution can be exercised without a network.
"""

from __future__ import annotations

import hashlib

from zapstore.domain.events import KIND_APP, KIND_ASSET, KIND_RELEASE, Event, EventFilter


class FakeEventQuery:
    """In-memory implementation of EventQueryPort for testing.

    Stored events are returned in insertion order when they match a filter.
    Every query is recorded for assertion in tests.

    Example:
        >>> fake = FakeEventQuery()
        >>> fake.add_event(Event(id="a1", pubkey="pk", kind=32267, tags=(("d", "tool"),)))
        >>> [e.id for e in fake.query_events("wss://relay", EventFilter(kinds=(32267,)))]
        ['a1']
    """

    def __init__(self, events: list[Event] | None = None) -> None:
        """Initialize with optional stored events.

        Args:
            events: Events the fake relay holds.
        """
        self._events: list[Event] = list(events or [])
        self._exception: BaseException | None = None
        self._calls: list[tuple[str, EventFilter, float | None]] = []

    @property
    def calls(self) -> list[tuple[str, EventFilter, float | None]]:
        """Return recorded (endpoint, filter, timeout) tuples."""
        return self._calls

    @property
    def filters(self) -> list[EventFilter]:
        return [call[1] for call in self._calls]

    def add_event(self, event: Event) -> None:
        self._events.append(event)

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}{len(self._events) + 1}"

    def publish_app(
        self,
        app_id: str,
        pubkey: str = "owner",
        platforms: tuple[str, ...] = ("linux-x86_64",),
        name: str = "",
        summary: str = "",
    ) -> Event:
        """Store an app event and return it."""
        tags: list[tuple[str, ...]] = [("d", app_id)]
        if name:
            tags.append(("name", name))
        if summary:
            tags.append(("summary", summary))
        tags.extend(("f", platform) for platform in platforms)
        event = Event(id=self._next_id("app"), pubkey=pubkey, kind=KIND_APP, tags=tuple(tags))
        self.add_event(event)
        return event

    def publish_release(
        self,
        app_id: str,
        version: str,
        asset_ids: tuple[str, ...] = (),
        pubkey: str = "owner",
    ) -> Event:
        """Store a release event referencing ``asset_ids`` and return it.

        An empty ``version`` publishes a release with no version at all.
        """
        tags: list[tuple[str, ...]] = [("i", app_id)]
        if version:
            tags.extend([("d", f"@{version}"), ("version", version)])
        tags.extend(("e", asset_id) for asset_id in asset_ids)
        event = Event(
            id=self._next_id("release"), pubkey=pubkey, kind=KIND_RELEASE, tags=tuple(tags)
        )
        self.add_event(event)
        return event

    def publish_asset(
        self,
        content: bytes | None = None,
        platform: str = "linux-x86_64",
        url: str = "",
        mime: str = "",
        filename: str = "",
        pubkey: str = "owner",
    ) -> Event:
        """Store an asset event and return it.

        The ``x`` tag is the sha256 of ``content`` when given.
        """
        tags: list[tuple[str, ...]] = []
        if url:
            tags.append(("url", url))
        if content is not None:
            tags.append(("x", hashlib.sha256(content).hexdigest()))
        if platform:
            tags.append(("f", platform))
        if mime:
            tags.append(("m", mime))
        if filename:
            tags.append(("filename", filename))
        event = Event(id=self._next_id("asset"), pubkey=pubkey, kind=KIND_ASSET, tags=tuple(tags))
        self.add_event(event)
        return event

    def set_exception(self, exception: BaseException | None) -> None:
        """Configure an exception to raise from query_events(), or None to clear."""
        self._exception = exception

    def clear_calls(self) -> None:
        self._calls.clear()

    def query_events(
        self,
        endpoint: str,
        event_filter: EventFilter,
        timeout: float | None = None,
    ) -> list[Event]:
        """Return stored events matching the filter, honoring its limit.

        Raises:
            Any exception configured via set_exception().
        """
        self._calls.append((endpoint, event_filter, timeout))

        if self._exception is not None:
            raise self._exception

        matched = [event for event in self._events if event_filter.matches(event)]
        if event_filter.limit is not None:
            matched = matched[: event_filter.limit]
        return matched
