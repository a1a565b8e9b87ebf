"""
Exporter package.

JSON serialization of import reports and trees.
"""

from __future__ import annotations

from .json_exporter import (
    build_import_report,
    serialize_to_json_string,
    to_json_compatible,
    tree_to_json,
)

__all__ = [
    "build_import_report",
    "serialize_to_json_string",
    "to_json_compatible",
    "tree_to_json",
]
