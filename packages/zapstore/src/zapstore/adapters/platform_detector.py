"""Platform detector adapter for detecting current OS and architecture.

This module provides an adapter that implements PlatformDetectorPort
by using Python's standard library platform module.
"""

from __future__ import annotations

import platform

from zapstore.adapters.ports import PlatformDetectorPort
from zapstore.domain.platform import PlatformTag, detect


class OsPlatformDetector:
    """Adapter that detects the current platform using platform module.

    Implements PlatformDetectorPort by querying platform.system() and
    platform.machine(). Both are lowercased before mapping, so ``AMD64``
    on Windows and ``x86_64`` on Linux land on the same architecture.
    Unsupported machines are not rejected; they produce a tag with no
    compatible MIME types.
    """

    def detect(self) -> PlatformTag:
        """Detect the current platform.

        Returns:
            PlatformTag for the running OS and architecture.
        """
        return detect(platform.system().lower(), platform.machine().lower())


# Runtime protocol check
assert isinstance(OsPlatformDetector(), PlatformDetectorPort)
