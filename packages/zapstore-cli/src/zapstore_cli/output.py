"""Terminal output helpers: status lines, tables and byte formatting."""

from __future__ import annotations

import os
import sys
from typing import TextIO

from colorama import Fore, Style

ICON_SUCCESS = "✓"
ICON_ERROR = "✗"
ICON_WARNING = "⚠"
ICON_ARROW = "→"
ICON_DOT = "·"

_UNITS = "KMGTPE"


def format_bytes(size: int) -> str:
    """Format a byte count in base 1024, e.g. ``512 B`` or ``1.5 MB``."""
    if size < 1024:
        return f"{size} B"
    value = float(size)
    exponent = -1
    while value >= 1024 and exponent < len(_UNITS) - 1:
        value /= 1024
        exponent += 1
    return f"{value:.1f} {_UNITS[exponent]}B"


def color_disabled(environ: dict[str, str] | None = None) -> bool:
    """Return True if the NO_COLOR convention asks for plain output."""
    env = os.environ if environ is None else environ
    return "NO_COLOR" in env


class Output:
    """Writes styled status lines to stdout and errors to stderr.

    With color disabled, icons fall back to ``[OK]``, ``[ERROR]``, ``[WARN]``
    and ``->``, and no escape sequences are written.
    """

    def __init__(
        self,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        no_color: bool = False,
    ) -> None:
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self.no_color = no_color

    def _style(self, text: str, *codes: str) -> str:
        if self.no_color:
            return text
        return "".join(codes) + text + Style.RESET_ALL

    def bold(self, text: str) -> str:
        return self._style(text, Style.BRIGHT)

    def dim(self, text: str) -> str:
        return self._style(text, Style.DIM)

    @property
    def checkmark(self) -> str:
        return "[OK]" if self.no_color else self._style(ICON_SUCCESS, Fore.GREEN)

    @property
    def cross(self) -> str:
        return "[ERROR]" if self.no_color else self._style(ICON_ERROR, Fore.RED)

    @property
    def warn_icon(self) -> str:
        return "[WARN]" if self.no_color else self._style(ICON_WARNING, Fore.YELLOW)

    @property
    def arrow(self) -> str:
        return "->" if self.no_color else ICON_ARROW

    def write(self, line: str = "") -> None:
        self.stdout.write(line + "\n")

    def success(self, message: str) -> None:
        self.write(f"  {self.checkmark} {message}")

    def info(self, message: str) -> None:
        dot = "-" if self.no_color else self.dim(ICON_DOT)
        self.write(f"  {dot} {message}")

    def warning(self, message: str) -> None:
        self.write(f"  {self.warn_icon} {message}")

    def error(self, message: str) -> None:
        self.stderr.write(f"  {self.cross} {message}\n")

    def result(self, message: str) -> None:
        self.write()
        self.write(f"  {self.checkmark} {self.bold(message)}")
        self.write()

    def table(self, headers: list[str], rows: list[list[str]]) -> None:
        """Write a left-aligned table with a header rule."""
        widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                widths[i] = max(widths[i], len(cell))

        rule_char = "-" if self.no_color else "─"
        header = "  ".join(h.ljust(w) for h, w in zip(headers, widths)).rstrip()
        rule = "  ".join(rule_char * w for w in widths)
        self.write(self.dim(header))
        self.write(self.dim(rule))
        for row in rows:
            self.write("  ".join(c.ljust(w) for c, w in zip(row, widths)).rstrip())
