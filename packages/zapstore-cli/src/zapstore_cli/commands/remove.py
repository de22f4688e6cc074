"""Remove command."""

from __future__ import annotations

import argparse

from zapstore_cli.base import BaseCommand


class Command(BaseCommand):
    """Uninstall an app and drop it from the registry."""

    name = "remove"
    aliases = ("r",)
    help = "Remove an installed package"

    @classmethod
    def add_arguments(cls, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("app_id", help="Application identifier")

    def handle(self, options: argparse.Namespace) -> int | None:
        with self.spinner(f"Removing {options.app_id}..."):
            record = self.manager.remove(options.app_id)
        self.output.success(
            f"Removed {options.app_id} {self.output.dim('v' + record.version)}"
        )
        return None
