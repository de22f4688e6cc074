"""Domain exceptions.

Exception hierarchy:
- ZapstoreError: Base exception for everything raised by the package manager.
  - ConfigError: Invalid settings or configuration file.
  - NotFoundError: No app, release or asset matched a resolution stage.
  - VerificationError: Downloaded content did not match its declared hash.
  - TransportError: Network or HTTP failure talking to a relay or blob host.
  - StateCorruptionError: The registry file exists but cannot be parsed.
  - FilesystemError: An OS-level failure on a path inside the package tree.
  - NotInstalledError: An operation targeted an app that is not installed.

Use cases raise these with context (operation and identifier) and chain the
underlying exception with ``raise ... from``. Adapters let library errors
propagate so the use case can decide what they mean.
"""

from __future__ import annotations


class ZapstoreError(Exception):
    """Base exception for all package manager errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigError(ZapstoreError):
    """Raised when settings or a config file are invalid."""

    pass


class NotFoundError(ZapstoreError):
    """Raised when a resolution stage yields zero matches.

    Terminal for the invocation; the caller reports it to the user.

    Attributes:
        message: Human-readable error description.
        stage: Resolution stage that found nothing ("app", "release", "asset").
        app_id: Application identifier being resolved.
    """

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        app_id: str | None = None,
    ) -> None:
        """Initialize NotFoundError.

        Args:
            message: Human-readable error description.
            stage: Resolution stage that found nothing.
            app_id: Application identifier being resolved.
        """
        super().__init__(message)
        self.stage = stage
        self.app_id = app_id


class VerificationError(ZapstoreError):
    """Raised when downloaded bytes do not hash to the expected digest.

    Attributes:
        message: Human-readable error description.
        expected: Expected lowercase hex sha256 digest.
        actual: Digest computed over the downloaded bytes.
    """

    def __init__(self, message: str, expected: str, actual: str) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class TransportError(ZapstoreError):
    """Raised when a relay query or a download fails at the network level.

    Covers connection failures, timeouts, HTTP error statuses and malformed
    relay responses.

    Attributes:
        message: Human-readable error description.
        url: The endpoint or download URL involved (optional).
        original_error: The underlying exception that caused the failure (optional).
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize TransportError.

        Args:
            message: Human-readable error description.
            url: The endpoint or URL that failed.
            original_error: The underlying exception that caused the failure.
        """
        super().__init__(message)
        self.url = url
        self.original_error = original_error


class StateCorruptionError(ZapstoreError):
    """Raised when the registry file exists but cannot be parsed.

    No automatic repair is attempted.

    Attributes:
        message: Human-readable error description.
        path: Path of the registry file.
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class FilesystemError(ZapstoreError):
    """Raised when creating, writing, linking or removing a path fails.

    Attributes:
        message: Human-readable error description.
        path: The path the operation failed on.
        original_error: The underlying OSError (optional).
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.original_error = original_error


class NotInstalledError(ZapstoreError):
    """Raised when update or remove targets an app missing from the registry.

    Attributes:
        message: Human-readable error description.
        app_id: The application identifier.
    """

    def __init__(self, app_id: str) -> None:
        super().__init__(f"{app_id} is not installed")
        self.app_id = app_id
