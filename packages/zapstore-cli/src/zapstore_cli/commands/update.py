"""Update command."""

from __future__ import annotations

import argparse

from zapstore.usecases.package_manager import UpdateStatus
from zapstore_cli.base import BaseCommand


class Command(BaseCommand):
    """Update one installed app, or all of them."""

    name = "update"
    aliases = ("u",)
    help = "Update one or all installed packages"

    @classmethod
    def add_arguments(cls, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "app_id",
            nargs="?",
            default=None,
            help="Application identifier (default: all installed packages)",
        )

    def handle(self, options: argparse.Namespace) -> int | None:
        out = self.output

        with self.spinner("Checking for updates...") as spinner:
            report = self.manager.update(
                options.app_id,
                on_check=lambda app_id, version: spinner.update_message(
                    f"Checking {app_id} v{version}..."
                ),
            )

        if not report.items:
            out.info("No packages installed.")
            return None

        for item in report.items:
            if item.status is UpdateStatus.UPDATED:
                out.success(
                    f"{item.app_id} {out.dim('v' + item.installed_version)} "
                    f"{out.arrow} {out.bold('v' + str(item.latest_version))}"
                )
            elif item.status is UpdateStatus.UP_TO_DATE:
                out.success(f"{item.app_id} {out.dim('up to date')}")
            else:
                out.error(f"{item.app_id}: {item.error}")

        out.write()
        updated = len(report.updated)
        if updated:
            out.success(f"Updated {updated} package(s).")
        elif report.ok:
            out.success("All packages are up to date.")

        if not report.ok:
            out.error(f"{len(report.failed)} package(s) failed to update.")
            return 1
        return None
