"""Version ordering for published releases.

Versions follow a pragmatic superset of Semantic Versioning:

- An optional ``v``/``V`` prefix is ignored.
- Build metadata after the first ``+`` is discarded.
- The core is a dot-separated list of integers of any length, compared
  numerically with missing components treated as zero. Non-numeric core
  components parse as zero.
- A pre-release suffix (after the first ``-``) orders below the same core
  without one. Pre-release identifiers compare pairwise: numeric ones as
  integers, textual ones by code point, numeric below textual, and a shorter
  identifier list below a longer one sharing its prefix.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from functools import total_ordering

_NUMERIC = re.compile(r"[0-9]+")


class Ordering(IntEnum):
    """Three-way comparison outcome."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


def _sign(a: int, b: int) -> Ordering:
    if a < b:
        return Ordering.LESS
    if a > b:
        return Ordering.GREATER
    return Ordering.EQUAL


@dataclass(frozen=True)
class PrereleaseIdentifier:
    """One dot-separated pre-release identifier, e.g. ``alpha`` or ``10``."""

    text: str

    @property
    def is_numeric(self) -> bool:
        return _NUMERIC.fullmatch(self.text) is not None

    def compare(self, other: PrereleaseIdentifier) -> Ordering:
        if self.is_numeric and other.is_numeric:
            return _sign(int(self.text), int(other.text))
        if self.is_numeric != other.is_numeric:
            return Ordering.LESS if self.is_numeric else Ordering.GREATER
        if self.text < other.text:
            return Ordering.LESS
        if self.text > other.text:
            return Ordering.GREATER
        return Ordering.EQUAL


@total_ordering
@dataclass(frozen=True, eq=False)
class VersionValue:
    """Parsed version string.

    Immutable value object. Equality, hashing and ordering follow
    :func:`compare`, so ``VersionValue.parse("1.2")`` equals
    ``VersionValue.parse("v1.2.0+build")``.

    Attributes:
        original: The string the value was parsed from, kept for display.
        core: Numeric core components.
        prerelease: Pre-release identifiers, empty for a stable version.
    """

    original: str
    core: tuple[int, ...]
    prerelease: tuple[PrereleaseIdentifier, ...] = ()

    @classmethod
    def parse(cls, version_string: str) -> VersionValue:
        """Parse a version string. Never fails; unparsable parts become zero.

        Args:
            version_string: Version string such as ``1.2.3``, ``v2.0.0-rc.1``
                or ``2024.05+nightly``.

        Returns:
            VersionValue instance.
        """
        text = version_string.removeprefix("v").removeprefix("V")
        text = text.split("+", 1)[0]

        core_text, _, pre_text = text.partition("-")

        core = tuple(
            int(part) if _NUMERIC.fullmatch(part) else 0
            for part in core_text.split(".")
        )
        prerelease = tuple(
            PrereleaseIdentifier(part) for part in pre_text.split(".")
        ) if pre_text else ()

        return cls(original=version_string, core=core, prerelease=prerelease)

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def compare(self, other: VersionValue) -> Ordering:
        """Three-way compare against another parsed version."""
        width = max(len(self.core), len(other.core))
        for i in range(width):
            a = self.core[i] if i < len(self.core) else 0
            b = other.core[i] if i < len(other.core) else 0
            if a != b:
                return _sign(a, b)

        if self.is_prerelease and not other.is_prerelease:
            return Ordering.LESS
        if not self.is_prerelease and other.is_prerelease:
            return Ordering.GREATER

        for mine, theirs in zip(self.prerelease, other.prerelease):
            result = mine.compare(theirs)
            if result != Ordering.EQUAL:
                return result

        # Shared prefix: the shorter identifier list is lower
        return _sign(len(self.prerelease), len(other.prerelease))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionValue):
            return NotImplemented
        return self.compare(other) == Ordering.EQUAL

    def __lt__(self, other: VersionValue) -> bool:
        if not isinstance(other, VersionValue):
            return NotImplemented
        return self.compare(other) == Ordering.LESS

    def __hash__(self) -> int:
        core = list(self.core)
        while core and core[-1] == 0:
            core.pop()
        prerelease = tuple(
            int(p.text) if p.is_numeric else p.text for p in self.prerelease
        )
        return hash((tuple(core), prerelease))

    def __str__(self) -> str:
        return self.original


def compare(a: str, b: str) -> Ordering:
    """Compare two version strings.

    Args:
        a: First version string.
        b: Second version string.

    Returns:
        Ordering.LESS, Ordering.EQUAL or Ordering.GREATER for ``a`` relative
        to ``b``.
    """
    return VersionValue.parse(a).compare(VersionValue.parse(b))


def can_upgrade(installed: str, candidate: str) -> bool:
    """Return True if ``candidate`` is strictly newer than ``installed``."""
    return compare(candidate, installed) == Ordering.GREATER
