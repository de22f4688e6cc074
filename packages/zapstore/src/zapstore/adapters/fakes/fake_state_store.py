"""In-memory registry store for testing."""

from __future__ import annotations

import copy

from zapstore.domain.package_state import PackageState


class FakeStateStore:
    """In-memory implementation of PackageStatePort.

    Each load() returns an independent copy of the last saved state, the
    way re-reading a file would.
    """

    def __init__(self, state: PackageState | None = None) -> None:
        self._state = copy.deepcopy(state) if state is not None else PackageState()
        self._exception: BaseException | None = None
        self._save_exception: BaseException | None = None
        self.save_count = 0

    @property
    def state(self) -> PackageState:
        """Return the currently persisted state."""
        return self._state

    def set_exception(self, exception: BaseException | None) -> None:
        """Configure an exception to raise from load(), or None to clear."""
        self._exception = exception

    def set_save_exception(self, exception: BaseException | None) -> None:
        """Configure an exception to raise from save(), or None to clear."""
        self._save_exception = exception

    def load(self) -> PackageState:
        if self._exception is not None:
            raise self._exception
        return copy.deepcopy(self._state)

    def save(self, state: PackageState) -> None:
        if self._save_exception is not None:
            raise self._save_exception
        self._state = copy.deepcopy(state)
        self.save_count += 1
