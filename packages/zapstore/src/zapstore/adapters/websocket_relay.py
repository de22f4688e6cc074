"""WebSocket implementation of the EventQueryPort.

A query opens a connection to the relay, sends ``["REQ", <sub>, <filter>]``
and collects ``["EVENT", <sub>, <event>]`` messages until the relay answers
``["EOSE", <sub>]``. The subscription is then closed along with the
connection.
"""

from __future__ import annotations

import json
import logging
import secrets
import time
from collections.abc import Callable
from typing import Any
from urllib.parse import urlparse, urlunparse

from websockets.sync.client import connect as ws_connect

from zapstore.adapters.ports import EventQueryPort
from zapstore.domain.events import Event, EventFilter
from zapstore.domain.exceptions import TransportError, ZapstoreError

logger = logging.getLogger(__name__)

_SCHEME_MAP = {"http": "ws", "https": "wss"}


def websocket_endpoint(endpoint: str) -> str:
    """Map an ``http://``/``https://`` relay URL to its ``ws://``/``wss://`` form."""
    parsed = urlparse(endpoint)
    scheme = _SCHEME_MAP.get(parsed.scheme, parsed.scheme)
    return urlunparse(parsed._replace(scheme=scheme))


class WebSocketRelayClient:
    """WebSocket adapter for querying relay events.

    Implements EventQueryPort for use by the resolution chain. Each query
    uses its own connection.

    Attributes:
        timeout: Default query timeout in seconds, covering the handshake
            and every message up to EOSE.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        connect: Callable[..., Any] | None = None,
    ) -> None:
        """Initialize the relay client.

        Args:
            timeout: Default query timeout in seconds. Defaults to 30.0.
            connect: Optional connection factory for dependency injection
                (testing). Called as ``connect(url, open_timeout=...)`` and
                used as a context manager. Defaults to the websockets sync
                client.
        """
        self._timeout = timeout
        self._connect = connect if connect is not None else ws_connect

    def query_events(
        self,
        endpoint: str,
        event_filter: EventFilter,
        timeout: float | None = None,
    ) -> list[Event]:
        """Run one subscription on the relay and return its stored events.

        Args:
            endpoint: Relay URL (ws, wss, http or https).
            event_filter: Filter to run.
            timeout: Per-query timeout in seconds; defaults to the client's.

        Returns:
            Events in relay order.

        Raises:
            websockets.exceptions.WebSocketException: For handshake failures
                or a connection closed mid-query.
            OSError: For network failures.
            TransportError: If the relay times out, refuses the subscription,
                or sends a malformed message.
        """
        url = websocket_endpoint(endpoint)
        effective_timeout = timeout if timeout is not None else self._timeout
        subscription = secrets.token_hex(8)
        body = event_filter.to_dict()
        logger.debug("Querying %s with filter %s", url, body)

        deadline = time.monotonic() + effective_timeout
        with self._connect(url, open_timeout=effective_timeout) as connection:
            connection.send(json.dumps(["REQ", subscription, body]))
            events = self._collect(connection, subscription, url, deadline)
            connection.send(json.dumps(["CLOSE", subscription]))

        logger.debug("Relay %s returned %d event(s)", url, len(events))
        return events

    def _collect(
        self, connection: Any, subscription: str, url: str, deadline: float
    ) -> list[Event]:
        events: list[Event] = []
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TransportError(f"Relay {url} did not finish the query in time", url=url)
            try:
                raw = connection.recv(timeout=remaining)
            except TimeoutError as e:
                raise TransportError(
                    f"Relay {url} did not finish the query in time",
                    url=url,
                    original_error=e,
                ) from e

            message = self._decode(raw, url)
            kind = message[0]
            if kind == "EVENT" and len(message) >= 3 and message[1] == subscription:
                events.append(self._parse_event(message[2], url))
            elif kind == "EOSE" and message[1:2] == [subscription]:
                return events
            elif kind == "CLOSED" and message[1:2] == [subscription]:
                reason = message[2] if len(message) >= 3 else ""
                raise TransportError(f"Relay closed the subscription: {reason}", url=url)
            elif kind == "NOTICE":
                logger.debug("Relay %s notice: %s", url, message[1:])
            else:
                logger.debug("Ignoring relay message %s", kind)

    @staticmethod
    def _decode(raw: str | bytes, url: str) -> list[Any]:
        try:
            message = json.loads(raw)
        except ValueError as e:
            raise TransportError(
                f"Relay sent invalid JSON: {e}", url=url, original_error=e
            ) from e
        if not isinstance(message, list) or not message or not isinstance(message[0], str):
            raise TransportError(f"Relay sent a malformed message: {message!r}", url=url)
        return message

    @staticmethod
    def _parse_event(entry: Any, url: str) -> Event:
        if not isinstance(entry, dict):
            raise TransportError(f"Relay sent a non-object event: {entry!r}", url=url)
        try:
            return Event.from_dict(entry)
        except ZapstoreError as e:
            raise TransportError(e.message, url=url, original_error=e) from e


# Runtime protocol check
assert isinstance(WebSocketRelayClient(), EventQueryPort)
