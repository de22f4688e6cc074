"""Cleanup command."""

from __future__ import annotations

import argparse

from zapstore_cli.base import BaseCommand
from zapstore_cli.output import format_bytes


class Command(BaseCommand):
    """Remove old version directories and dangling symlinks."""

    name = "cleanup"
    aliases = ("gc",)
    help = "Remove old versions and dangling symlinks"

    def handle(self, options: argparse.Namespace) -> int | None:
        with self.spinner("Cleaning up..."):
            result = self.manager.cleanup()

        if result.removed == 0 and result.dangling_links == 0:
            self.output.success("Nothing to clean up")
            return None

        self.output.success(
            f"Removed {result.removed} old version(s), freed {format_bytes(result.bytes_freed)}"
        )
        if result.dangling_links:
            self.output.info(f"Removed {result.dangling_links} dangling link(s)")
        return None
