# src/ancestry_atlas/loader/__init__.py

"""
Public interface for the line loader.

Intended usage from other parts of the project and tests:

    from ancestry_atlas.loader import (
        RawRecord,
        GedcomSyntaxError,
        tokenize_line,
        tokenize_text,
        tokenize_file,
    )
"""

from __future__ import annotations

from .tokenizer import (
    GedcomSyntaxError,
    RawRecord,
    tokenize_file,
    tokenize_line,
    tokenize_lines,
    tokenize_text,
)

__all__ = [
    "GedcomSyntaxError",
    "RawRecord",
    "tokenize_file",
    "tokenize_line",
    "tokenize_lines",
    "tokenize_text",
]
