"""Command-line entry point: ``zapstore <command> [arguments]``."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable, Sequence

from colorama import just_fix_windows_console

from zapstore import __version__
from zapstore.adapters.environment_settings import EnvironmentSettingsLoader
from zapstore.domain.exceptions import ZapstoreError
from zapstore.domain.settings import ZapstoreSettings
from zapstore.factories import create_legacy_migrator, create_package_manager
from zapstore.usecases.package_manager import PackageManager
from zapstore_cli.base import BaseCommand
from zapstore_cli.commands import COMMANDS
from zapstore_cli.output import Output, color_disabled

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def build_parser(commands: Sequence[type[BaseCommand]] = COMMANDS) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zapstore",
        description="zapstore - install apps published to relay directories",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    sub = parser.add_subparsers(dest="command", required=True, metavar="<command>")
    for command_class in commands:
        command_parser = sub.add_parser(
            command_class.name, aliases=list(command_class.aliases), help=command_class.help
        )
        command_parser.set_defaults(command_class=command_class)
        command_class.add_arguments(command_parser)
    return parser


def _migrate(loader: EnvironmentSettingsLoader, settings: ZapstoreSettings, output: Output) -> None:
    migrator = create_legacy_migrator(loader, settings)
    try:
        if migrator.migrate():
            output.info(f"Migrated {loader.legacy_dir()} {output.arrow} {settings.data_dir}")
    except OSError as e:
        logger.debug("Legacy migration failed", exc_info=True)
        output.warning(f"migration: {e}")


def main(
    argv: Sequence[str] | None = None,
    loader: EnvironmentSettingsLoader | None = None,
    manager_factory: Callable[[ZapstoreSettings], PackageManager] = create_package_manager,
    output: Output | None = None,
) -> int:
    """Parse arguments, load settings and run a subcommand.

    Args:
        argv: Arguments without the program name; defaults to ``sys.argv[1:]``.
        loader: Settings loader; defaults to one reading the process environment.
        manager_factory: Builds the PackageManager from settings.
        output: Output sink; defaults to stdout/stderr.

    Returns:
        Process exit status.
    """
    parser = build_parser()
    options = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )

    if output is None:
        just_fix_windows_console()
        output = Output(no_color=options.no_color or color_disabled())

    loader = loader or EnvironmentSettingsLoader()
    try:
        settings = loader.load()
    except ZapstoreError as e:
        output.error(e.message)
        return 1

    _migrate(loader, settings, output)

    command = options.command_class(manager_factory(settings), output)
    return command.execute(options)


if __name__ == "__main__":
    sys.exit(main())
