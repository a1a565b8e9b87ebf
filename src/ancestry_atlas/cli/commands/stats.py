from __future__ import annotations

from collections import Counter
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ancestry_atlas.cli.utils import load_records
from ancestry_atlas.events.deriver import derive_events
from ancestry_atlas.places.normalizer import normalize_place

console = Console()


def stats_command(
    gedcom: Path = typer.Argument(..., exists=True, readable=True),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print parse timing details",
    ),
):
    """
    Show summary statistics for a GEDCOM file (no geocoding).
    """
    parsed = load_records(gedcom, verbose=verbose)
    persons = parsed.named_persons()
    events = derive_events(persons)
    kinds = Counter(evt.kind for evt in events)
    places = {normalize_place(evt.place) for evt in events} - {None}

    table = Table(title="GEDCOM Statistics")
    table.add_column("Entity", style="bold")
    table.add_column("Count", justify="right")

    table.add_row("People", str(len(persons)))
    table.add_row("Unnamed records", str(len(parsed.persons) - len(persons)))
    table.add_row("Family links", str(len(parsed.family_links)))
    table.add_row("Birth events", str(kinds["birth"]))
    table.add_row("Death events", str(kinds["death"]))
    table.add_row("Burial events", str(kinds["burial"]))
    table.add_row("Distinct places", str(len(places)))

    console.print(table)
