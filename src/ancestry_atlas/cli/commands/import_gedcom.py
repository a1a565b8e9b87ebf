from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from ancestry_atlas.cli.utils import write_json
from ancestry_atlas.core.exceptions import ImportFailedError
from ancestry_atlas.exporter.json_exporter import build_import_report
from ancestry_atlas.geocoding.service import GeocodingService
from ancestry_atlas.importer.orchestrator import EVENT_SOURCE, ImportOrchestrator
from ancestry_atlas.models import ImportResult
from ancestry_atlas.storage.memory import InMemoryStore

console = Console()


def _summary_table(result: ImportResult) -> Table:
    table = Table(title="Import Summary")
    table.add_column("Field", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("People stored", str(result.people_count))
    table.add_row("Family links stored", str(result.family_link_count))
    table.add_row("Events imported", str(result.imported))
    table.add_row("Events skipped", str(result.skipped))
    table.add_row("People with events", str(len(result.people_display_names)))
    return table


def import_command(
    gedcom: Path = typer.Argument(..., exists=True, readable=True),
    owner: str = typer.Option(
        "local",
        "--owner",
        help="Owner id the imported records are stored under",
    ),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write the summary and stored events as JSON",
    ),
    pretty: bool = typer.Option(
        False,
        "--pretty",
        help="Pretty-print JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print the number of geocoding lookups issued",
    ),
):
    """
    Import a GEDCOM file, geocode its events and report what was stored.
    """
    store = InMemoryStore()
    geocoder = GeocodingService()

    progress = Progress(
        TextColumn("[bold blue]Geocoding places"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
    )
    task = progress.add_task("geocode", total=None)

    def on_progress(completed: int, total: int) -> None:
        progress.update(task, completed=completed, total=total)

    orchestrator = ImportOrchestrator(store, geocoder, on_progress=on_progress)

    try:
        with progress:
            result = orchestrator.import_file(gedcom, owner)
    except ImportFailedError as exc:
        console.print(f"[red]Import failed:[/red] {exc}")
        raise typer.Exit(code=1)
    finally:
        geocoder.close()

    if verbose:
        console.log(f"Geocoding lookups issued: {geocoder.lookup_count}")

    console.print(_summary_table(result))
    console.print(result.message)

    if out:
        report = build_import_report(result, store.events(owner, EVENT_SOURCE))
        write_json(report, out=out, pretty=pretty)
        console.print(f"Report written to {out}")
