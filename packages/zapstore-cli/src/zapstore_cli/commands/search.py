"""Search command."""

from __future__ import annotations

import argparse

from zapstore_cli.base import BaseCommand


class Command(BaseCommand):
    """Search the relay for apps available on this platform."""

    name = "search"
    aliases = ("s",)
    help = "Search for packages on the relay"

    @classmethod
    def add_arguments(cls, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("query", nargs="+", help="Search terms")

    def handle(self, options: argparse.Namespace) -> int | None:
        query = " ".join(options.query)
        out = self.output

        with self.spinner(f"Searching for {query!r}..."):
            apps = self.manager.search(query)

        if not apps:
            out.warning("No results found.")
            return None

        out.success(f"Found {len(apps)} result(s)")
        out.write()
        for app in apps:
            title = out.bold(app.app_id)
            if app.name and app.name != app.app_id:
                title += f" {out.dim('(' + app.name + ')')}"
            out.write(f"  {title}")
            if app.summary:
                out.write(f"    {out.dim(app.summary)}")
            out.write()
        return None
