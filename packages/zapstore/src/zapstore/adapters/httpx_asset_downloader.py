"""HTTPX-based implementation of the AssetDownloaderPort.

This adapter uses httpx to fetch release binaries into memory.
"""

from __future__ import annotations

import logging

import httpx

from zapstore.adapters.ports import AssetDownloaderPort

logger = logging.getLogger(__name__)


class HttpxAssetDownloader:
    """HTTPX-based adapter for downloading asset binaries.

    The whole body is read before returning; redirects are followed since
    blob hosts commonly redirect to storage buckets.
    """

    def __init__(
        self,
        timeout: float = 300.0,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the downloader.

        Args:
            timeout: Default request timeout in seconds.
            client: Optional httpx.Client for dependency injection (testing).
                   If not provided, a new client is created per request.
        """
        self._timeout = timeout
        self._client = client

    def download(self, url: str, timeout: float | None = None) -> bytes:
        """Download the body at ``url``.

        Args:
            url: Asset URL.
            timeout: Per-request timeout in seconds; defaults to the adapter's.

        Returns:
            Response body bytes.

        Raises:
            httpx.RequestError: For network failures or timeouts.
            httpx.HTTPStatusError: For HTTP errors (4xx, 5xx).
        """
        effective_timeout = timeout if timeout is not None else self._timeout
        logger.debug("Downloading %s", url)

        if self._client is not None:
            response = self._client.get(
                url, timeout=effective_timeout, follow_redirects=True
            )
            response.raise_for_status()
            content = response.content
        else:
            with httpx.Client(follow_redirects=True) as client:
                response = client.get(url, timeout=effective_timeout)
                response.raise_for_status()
                content = response.content

        logger.debug("Downloaded %d bytes from %s", len(content), url)
        return content


# Runtime protocol check
assert isinstance(HttpxAssetDownloader(), AssetDownloaderPort)
