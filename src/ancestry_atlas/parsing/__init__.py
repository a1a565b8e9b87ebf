"""
Record parsing: level-tagged lines -> Person / FamilyLink entities.
"""

from ancestry_atlas.parsing.record_parser import (
    OUTSIDE,
    ParserState,
    parse_lines,
    parse_records,
    step,
)

__all__ = ["OUTSIDE", "ParserState", "parse_lines", "parse_records", "step"]
