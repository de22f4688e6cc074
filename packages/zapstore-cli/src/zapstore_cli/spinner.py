"""Terminal spinner shown while a network operation runs.

The animation runs on a background thread. Stopping sets an event, joins the
thread and clears the line, so nothing is drawn after a result is printed.
"""

from __future__ import annotations

import threading
from typing import TextIO

BRAILLE_FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")
ASCII_FRAMES = ("|", "/", "-", "\\")

FRAME_INTERVAL = 0.08

_CLEAR_LINE = "\r\033[K"


class Spinner:
    """Animated progress indicator.

    When ``enabled`` is False (for example when the stream is not a
    terminal) start and stop do nothing and no thread is created.

    Example:
        >>> import io
        >>> spinner = Spinner("Working...", stream=io.StringIO(), enabled=False)
        >>> with spinner:
        ...     pass
    """

    def __init__(
        self,
        message: str,
        stream: TextIO,
        ascii_only: bool = False,
        enabled: bool = True,
        interval: float = FRAME_INTERVAL,
    ) -> None:
        self._message = message
        self._stream = stream
        self._frames = ASCII_FRAMES if ascii_only else BRAILLE_FRAMES
        self._enabled = enabled
        self._interval = interval
        self._index = 0
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def active(self) -> bool:
        return self._thread is not None

    @property
    def message(self) -> str:
        with self._lock:
            return self._message

    def update_message(self, message: str) -> None:
        with self._lock:
            self._message = message

    def start(self) -> None:
        if not self._enabled or self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="spinner", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the animation and wait for the thread to exit."""
        thread = self._thread
        if thread is None:
            return
        self._stop.set()
        thread.join()
        self._thread = None
        self._stream.write(_CLEAR_LINE)
        self._stream.flush()

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            with self._lock:
                frame = self._frames[self._index]
                self._index = (self._index + 1) % len(self._frames)
                message = self._message
            self._stream.write(f"{_CLEAR_LINE}{frame} {message}")
            self._stream.flush()

    def __enter__(self) -> Spinner:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
