"""Install command."""

from __future__ import annotations

import argparse

from zapstore.usecases.package_manager import InstallStatus
from zapstore_cli.base import BaseCommand
from zapstore_cli.output import format_bytes


class Command(BaseCommand):
    """Resolve, download, verify and install an app."""

    name = "install"
    aliases = ("i",)
    help = "Install a package"

    @classmethod
    def add_arguments(cls, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("app_id", help="Application identifier")

    def handle(self, options: argparse.Namespace) -> int | None:
        app_id = options.app_id
        out = self.output
        out.info(f"{out.dim('platform')} {self.manager.platform.tag}")

        with self.spinner(f"Installing {app_id}..."):
            outcome = self.manager.install(app_id)

        app = outcome.resolved.app
        version = outcome.resolved.release.version_string
        out.success(f"Found {out.bold(app.name)} {out.dim('v' + version)}")

        if outcome.status is InstallStatus.UP_TO_DATE:
            out.info(f"Already up to date {out.dim('(v' + str(outcome.previous_version) + ')')}")
            return None

        if outcome.status is InstallStatus.UPGRADED:
            out.info(
                f"Upgraded {out.dim('v' + str(outcome.previous_version))} "
                f"{out.arrow} {out.dim('v' + version)}"
            )

        binary = outcome.binary
        assert binary is not None
        out.success(f"Downloaded {binary.binary_name} ({format_bytes(binary.size_bytes)})")
        if outcome.resolved.asset.hash:
            out.info(f"Hash verified {out.dim('(SHA-256)')}")
        out.result(f"Installed {app.name} v{version} {out.arrow} {binary.symlink_path}")
        return None
