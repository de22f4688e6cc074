"""Base class for CLI subcommands."""

from __future__ import annotations

import argparse
import logging
from typing import TYPE_CHECKING, Any

from zapstore.domain.exceptions import ZapstoreError
from zapstore_cli.spinner import Spinner

if TYPE_CHECKING:
    from zapstore.usecases.package_manager import PackageManager
    from zapstore_cli.output import Output

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """Raised by a command to stop with an error message and exit status.

    Attributes:
        returncode: Process exit status to use.
    """

    def __init__(self, message: str, returncode: int = 1) -> None:
        super().__init__(message)
        self.returncode = returncode


class BaseCommand:
    """A subcommand: declares its arguments and handles parsed options.

    Subclasses set ``name`` and ``help``, override ``add_arguments`` when
    they take arguments, and implement ``handle``. ``handle`` returns an
    exit status, or None for success.
    """

    name: str = ""
    help: str = ""
    aliases: tuple[str, ...] = ()

    def __init__(self, manager: PackageManager, output: Output) -> None:
        self.manager = manager
        self.output = output

    @classmethod
    def add_arguments(cls, parser: argparse.ArgumentParser) -> None:
        """Add command-line arguments."""

    def handle(self, options: argparse.Namespace) -> int | None:
        raise NotImplementedError("subclasses of BaseCommand must provide a handle() method")

    def spinner(self, message: str) -> Spinner:
        stream = self.output.stderr
        return Spinner(
            message,
            stream=stream,
            ascii_only=self.output.no_color,
            enabled=_isatty(stream),
        )

    def execute(self, options: argparse.Namespace) -> int:
        """Run ``handle`` and map errors to an exit status.

        Returns:
            0 on success, the CommandError's return code, or 1 for any
            package manager error.
        """
        try:
            result = self.handle(options)
        except CommandError as e:
            self.output.error(str(e))
            return e.returncode
        except ZapstoreError as e:
            logger.debug("%s failed", self.name, exc_info=True)
            self.output.error(e.message)
            return 1
        return 0 if result is None else int(result)


def _isatty(stream: Any) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())
