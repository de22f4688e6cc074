"""List command."""

from __future__ import annotations

import argparse

from zapstore_cli.base import BaseCommand

# Width of "YYYY-MM-DDTHH:MM:SS"
_TIMESTAMP_WIDTH = 19


class Command(BaseCommand):
    """Print installed packages as a table."""

    name = "list"
    aliases = ("l", "ls")
    help = "List installed packages"

    def handle(self, options: argparse.Namespace) -> int | None:
        installed = self.manager.list_installed()
        if not installed:
            self.output.info("No packages installed.")
            return None

        rows = [
            [
                app_id,
                record.version,
                ", ".join(record.executables),
                record.installed_at[:_TIMESTAMP_WIDTH],
            ]
            for app_id, record in installed
        ]
        self.output.write()
        self.output.table(["PACKAGE", "VERSION", "EXECUTABLES", "INSTALLED"], rows)
        self.output.write()
        self.output.write(self.output.dim(f"{len(rows)} package(s) installed."))
        return None
