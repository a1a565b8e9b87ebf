"""
json_exporter.py
JSON output for import summaries, stored events and trees.

Everything goes through ``to_json_compatible`` first, so dataclasses
(slots or not), tuples and nested trees all come out as plain dicts/lists.
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Iterable, Optional

from ancestry_atlas.models import ImportResult, StoredEvent, TreeNode


def to_json_compatible(obj: Any) -> Any:
    """
    Recursively convert objects into JSON-compatible structures.

    Rules:
    - Primitives pass through
    - TreeNode -> {"name", "attributes", "children"}
    - dataclasses -> dict (recursively)
    - dict -> dict with string keys (recursively)
    - list / tuple / set -> list (recursively)
    - Anything else -> str(obj)
    """
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj

    if isinstance(obj, TreeNode):
        return obj.to_dict()

    if is_dataclass(obj) and not isinstance(obj, type):
        return {k: to_json_compatible(v) for k, v in asdict(obj).items()}

    if isinstance(obj, dict):
        return {str(k): to_json_compatible(v) for k, v in obj.items()}

    if isinstance(obj, (list, tuple, set)):
        return [to_json_compatible(v) for v in obj]

    return str(obj)


def build_import_report(result: ImportResult, events: Iterable[StoredEvent]) -> Dict[str, Any]:
    return {
        "summary": to_json_compatible(result.as_dict()),
        "events": [to_json_compatible(evt) for evt in events],
    }


def serialize_to_json_string(payload: Any, pretty: bool = False) -> str:
    return json.dumps(
        to_json_compatible(payload),
        indent=2 if pretty else None,
        ensure_ascii=False,
    )


def tree_to_json(tree: Optional[TreeNode], pretty: bool = False) -> str:
    """``null`` when there is no tree."""
    return serialize_to_json_string(tree, pretty=pretty)
