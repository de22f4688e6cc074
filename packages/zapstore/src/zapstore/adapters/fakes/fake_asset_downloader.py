"""Fake asset downloader for testing.

Provides a test double for AssetDownloaderPort that serves preconfigured
bodies without network operations.
"""

from __future__ import annotations


class FakeAssetDownloader:
    """Fake implementation of AssetDownloaderPort for testing.

    Serves bodies registered per URL, falling back to a default body.
    Supports configuring exceptions for error path testing and records
    all calls for assertion in tests.

    Example:
        >>> fake = FakeAssetDownloader(default=b"binary")
        >>> fake.set_response("https://example.com/tool", b"tool bytes")
        >>> fake.download("https://example.com/tool")
        b'tool bytes'
        >>> fake.download("https://example.com/other")
        b'binary'
    """

    def __init__(self, default: bytes | None = None) -> None:
        """Initialize with an optional default body.

        Args:
            default: Body returned for URLs without a registered response.
                If None, unknown URLs raise KeyError.
        """
        self._default = default
        self._responses: dict[str, bytes] = {}
        self._exception: BaseException | None = None
        self._calls: list[str] = []

    @property
    def calls(self) -> list[str]:
        """Return the URLs passed to download(), in order."""
        return self._calls

    def set_response(self, url: str, content: bytes) -> None:
        self._responses[url] = content

    def set_exception(self, exception: BaseException | None) -> None:
        """Configure an exception to raise from download(), or None to clear."""
        self._exception = exception

    def clear_calls(self) -> None:
        self._calls.clear()

    def download(self, url: str, timeout: float | None = None) -> bytes:
        """Return the body registered for ``url``.

        Raises:
            Any exception configured via set_exception().
            KeyError: If no body is registered and there is no default.
        """
        self._calls.append(url)

        if self._exception is not None:
            raise self._exception

        if url in self._responses:
            return self._responses[url]
        if self._default is not None:
            return self._default
        raise KeyError(f"No fake response registered for {url}")
