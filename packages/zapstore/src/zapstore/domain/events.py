"""Relay events and query filters.

Events are the signed metadata records published to relays. The core never
checks signatures or timestamps; it reads ids, authors, kinds and tags.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from zapstore.domain.exceptions import ZapstoreError

# Event kinds consumed by the resolution chain
KIND_APP = 32267
KIND_RELEASE = 30063
KIND_ASSET = 3063


@dataclass(frozen=True)
class Event:
    """A relay event.

    Attributes:
        id: Event identifier (hex).
        pubkey: Author public key (hex).
        kind: Event kind number.
        tags: Ordered tags; each tag is a tuple whose first element is its name.
        content: Free-form content, not inspected.
        created_at: Unix timestamp, not inspected.
        sig: Signature, not inspected.
    """

    id: str
    pubkey: str
    kind: int
    tags: tuple[tuple[str, ...], ...] = ()
    content: str = ""
    created_at: int = 0
    sig: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Event:
        """Build an Event from its JSON object form.

        Raises:
            ZapstoreError: If required fields are missing or mistyped.
        """
        try:
            return cls(
                id=str(data["id"]),
                pubkey=str(data["pubkey"]),
                kind=int(data["kind"]),
                tags=tuple(tuple(str(v) for v in tag) for tag in data.get("tags", [])),
                content=str(data.get("content", "")),
                created_at=int(data.get("created_at", 0)),
                sig=str(data.get("sig", "")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ZapstoreError(f"Malformed event: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "pubkey": self.pubkey,
            "kind": self.kind,
            "tags": [list(tag) for tag in self.tags],
            "content": self.content,
            "created_at": self.created_at,
            "sig": self.sig,
        }

    def tag_value(self, name: str) -> str:
        """Return the first value of the first tag called ``name``, or ""."""
        for tag in self.tags:
            if len(tag) >= 2 and tag[0] == name:
                return tag[1]
        return ""

    def tag_values(self, name: str) -> list[str]:
        """Return the first value of every tag called ``name``, in order."""
        return [tag[1] for tag in self.tags if len(tag) >= 2 and tag[0] == name]


@dataclass(frozen=True)
class EventFilter:
    """Relay query filter.

    Only fields that are set are sent. Tag constraints map a single-letter
    or named tag to its acceptable values and are rendered as ``#<name>``.

    Attributes:
        kinds: Acceptable event kinds.
        authors: Acceptable author public keys.
        ids: Exact event identifiers.
        tags: Tag name to acceptable values.
        search: Free-text search string.
        limit: Maximum number of events to return.
    """

    kinds: tuple[int, ...] = ()
    authors: tuple[str, ...] = ()
    ids: tuple[str, ...] = ()
    tags: dict[str, tuple[str, ...]] = field(default_factory=dict)
    search: str | None = None
    limit: int | None = None

    def __post_init__(self) -> None:
        """Validate filter configuration."""
        self._validate_limit()

    def _validate_limit(self) -> None:
        if self.limit is not None and self.limit < 1:
            raise ZapstoreError(f"limit must be positive, got: {self.limit}")

    def to_dict(self) -> dict[str, Any]:
        """Render the filter as the relay's JSON object."""
        data: dict[str, Any] = {}
        if self.ids:
            data["ids"] = list(self.ids)
        if self.authors:
            data["authors"] = list(self.authors)
        if self.kinds:
            data["kinds"] = list(self.kinds)
        for name, values in self.tags.items():
            data[f"#{name}"] = list(values)
        if self.search:
            data["search"] = self.search
        if self.limit is not None:
            data["limit"] = self.limit
        return data

    def matches(self, event: Event) -> bool:
        """Return True if ``event`` satisfies every set constraint.

        Search text is matched as a case-insensitive substring of the event's
        content and tag values. ``limit`` is not applied here.
        """
        if self.ids and event.id not in self.ids:
            return False
        if self.authors and event.pubkey not in self.authors:
            return False
        if self.kinds and event.kind not in self.kinds:
            return False
        for name, values in self.tags.items():
            if not any(v in values for v in event.tag_values(name)):
                return False
        if self.search:
            needle = self.search.lower()
            haystack = [event.content] + [v for tag in event.tags for v in tag[1:]]
            if not any(needle in text.lower() for text in haystack):
                return False
        return True
