"""Subcommands, in the order they appear in ``--help``."""

from __future__ import annotations

from zapstore_cli.base import BaseCommand
from zapstore_cli.commands import cleanup, install, list_installed, remove, search, update

COMMANDS: tuple[type[BaseCommand], ...] = (
    install.Command,
    update.Command,
    remove.Command,
    list_installed.Command,
    search.Command,
    cleanup.Command,
)
