"""Platform tags used to match published assets to the running machine.

A platform tag is the canonical ``{os}-{arch}`` string published in asset
``f`` tags (``darwin-arm64``, ``linux-aarch64``, ``windows-x86_64``). Each
known tag also carries the MIME types accepted as a fallback when an asset
omits its ``f`` tag.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# Machine names as reported by different systems, normalized first
_MACHINE_ALIASES: dict[str, str] = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
}

# Normalized machine name -> architecture segment of the tag
_ARCH_MAP: dict[str, str] = {
    "arm64": "arm64",
    "amd64": "x86_64",
}

# Linux publishes 64-bit ARM as aarch64
_LINUX_ARCH_MAP: dict[str, str] = {
    "arm64": "aarch64",
    "amd64": "x86_64",
}

PLATFORM_MIME_TYPES: dict[str, frozenset[str]] = {
    "darwin-arm64": frozenset({"application/x-mach-binary; arch=arm64"}),
    "darwin-x86_64": frozenset({"application/x-mach-binary; arch=x86-64"}),
    "linux-aarch64": frozenset({"application/x-executable; format=elf; arch=arm"}),
    "linux-x86_64": frozenset({"application/x-executable; format=elf; arch=x86-64"}),
    "windows-x86_64": frozenset({"application/x-msdownload"}),
}


@dataclass(frozen=True)
class PlatformTag:
    """Canonical platform identifier plus its compatible MIME types.

    Attributes:
        os: Operating system name as detected (lowercase).
        arch: Machine name as detected (lowercase).
        tag: Canonical ``{os}-{arch}`` string.
        mime_types: MIME types binary-compatible with ``tag``. Empty for
            unknown tags.
    """

    os: str
    arch: str
    tag: str
    mime_types: frozenset[str] = field(default_factory=frozenset)

    def matches_platform(self, value: str) -> bool:
        """Return True if an ``f`` tag value names this platform exactly."""
        return value == self.tag

    def matches_mime(self, mime: str) -> bool:
        """Return True if ``mime`` is one of this platform's MIME types."""
        return mime in self.mime_types

    def __str__(self) -> str:
        return self.tag


def detect(os_name: str, arch_name: str) -> PlatformTag:
    """Build the platform tag for an OS and machine name.

    Pure function; the runtime lookup lives in the platform detector adapter.
    Unrecognized machine names pass through unchanged.

    Args:
        os_name: Operating system, e.g. ``linux``, ``darwin``, ``windows``.
        arch_name: Machine name, e.g. ``x86_64``, ``amd64``, ``aarch64``.

    Returns:
        PlatformTag for the pair.
    """
    os_name = os_name.lower()
    arch_name = arch_name.lower()
    machine = _MACHINE_ALIASES.get(arch_name, arch_name)

    if os_name == "linux" and machine in _LINUX_ARCH_MAP:
        arch = _LINUX_ARCH_MAP[machine]
    else:
        arch = _ARCH_MAP.get(machine, arch_name)

    tag = f"{os_name}-{arch}"
    return PlatformTag(
        os=os_name,
        arch=arch_name,
        tag=tag,
        mime_types=PLATFORM_MIME_TYPES.get(tag, frozenset()),
    )
