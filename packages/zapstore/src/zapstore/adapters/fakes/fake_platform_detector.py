"""Fake platform detector for testing."""

from __future__ import annotations

from zapstore.domain.platform import PlatformTag, detect


class FakePlatformDetector:
    """Fake implementation of PlatformDetectorPort for testing.

    Example:
        >>> fake = FakePlatformDetector.from_names("linux", "x86_64")
        >>> fake.detect().tag
        'linux-x86_64'
    """

    def __init__(self, platform: PlatformTag) -> None:
        self._platform = platform

    @classmethod
    def from_names(cls, os_name: str, arch_name: str) -> FakePlatformDetector:
        """Create a detector for an OS and machine name pair."""
        return cls(detect(os_name, arch_name))

    def detect(self) -> PlatformTag:
        return self._platform
