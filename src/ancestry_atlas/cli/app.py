from __future__ import annotations

import typer
from rich.console import Console

from ancestry_atlas.cli.commands.import_gedcom import import_command
from ancestry_atlas.cli.commands.stats import stats_command
from ancestry_atlas.cli.commands.tree import tree_command

app = typer.Typer(
    name="atlas",
    help="Import family files, geocode life events and build family trees",
    add_completion=False,
)

console = Console()

app.command("import")(import_command)
app.command("tree")(tree_command)
app.command("stats")(stats_command)


def main():
    app()


if __name__ == "__main__":
    main()
