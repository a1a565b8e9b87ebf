from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Optional

from rich.console import Console

from ancestry_atlas.exporter.json_exporter import to_json_compatible
from ancestry_atlas.models import ParsedRecords
from ancestry_atlas.parsing.record_parser import parse_records

console = Console()


def load_records(path: Path, *, verbose: bool = False) -> ParsedRecords:
    """
    Read and parse a GEDCOM file without touching the network.
    """
    if not path.exists():
        raise FileNotFoundError(path)

    t0 = time.perf_counter()

    text = path.read_bytes().decode("utf-8", errors="replace")
    parsed = parse_records(text)

    elapsed = time.perf_counter() - t0

    if verbose:
        console.log(
            f"Parsed {len(parsed.persons)} people and "
            f"{len(parsed.family_links)} family links in {elapsed:.2f}s"
        )

    return parsed


def write_json(
    data: Any,
    *,
    out: Optional[Path],
    pretty: bool,
):
    """
    Write JSON to stdout or file.
    """
    data = to_json_compatible(data)
    if pretty:
        payload = json.dumps(data, indent=2, ensure_ascii=False)
    else:
        payload = json.dumps(data, separators=(",", ":"), ensure_ascii=False)

    if out:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(payload, encoding="utf-8")
    else:
        print(payload)
