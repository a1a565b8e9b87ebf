from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ancestry_atlas.cli.utils import load_records, write_json
from ancestry_atlas.tree.builder import build_gedcom_tree

console = Console()


def tree_command(
    gedcom: Path = typer.Argument(..., exists=True, readable=True),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write output to file instead of stdout",
    ),
    pretty: bool = typer.Option(
        False,
        "--pretty",
        help="Pretty-print JSON",
    ),
    root_label: Optional[str] = typer.Option(
        None,
        "--root-label",
        help="Name of the synthetic root when the file has several roots",
    ),
):
    """
    Print the ancestor tree of a GEDCOM file as JSON (null when empty).
    """
    parsed = load_records(gedcom)
    tree = build_gedcom_tree(parsed.named_persons(), parsed.family_links, root_label=root_label)

    write_json(tree, out=out, pretty=pretty)
