"""
CLI command modules for ancestry_atlas.

Each command module defines a single Typer-compatible command function.
"""

from ancestry_atlas.cli.commands.import_gedcom import import_command
from ancestry_atlas.cli.commands.stats import stats_command
from ancestry_atlas.cli.commands.tree import tree_command

__all__ = [
    "import_command",
    "stats_command",
    "tree_command",
]
