# src/ancestry_atlas/loader/tokenizer.py

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from ancestry_atlas.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class RawRecord:
    """
    A single level-tagged line.

    Attributes:
        lineno: 1-based line number in the original input.
        level: Parsed nesting level (0, 1, 2, ...).
        pointer: Optional cross-reference identifier before the tag, e.g. "@I1@".
        tag: Line tag, e.g. "INDI", "FAM", "NAME", "BIRT", "DATE".
        value: The line payload after the tag, trimmed (may be empty).
        raw: The original line content without trailing newline characters.
    """
    lineno: int
    level: int
    pointer: Optional[str]
    tag: str
    value: str
    raw: str


class GedcomSyntaxError(ValueError):
    """Raised when a line does not match ``<level> [@pointer@] <tag> [value]``."""


def _strip_eol(line: str) -> str:
    """Strip trailing CR/LF characters but preserve all other whitespace."""
    return line.rstrip("\r\n")


def tokenize_line(line: str, lineno: int = 0) -> RawRecord:
    """
    Parse a single line into a RawRecord.

    Required order:
        <level> [<pointer>] <tag> [<value>]

    Examples:
        "0 HEAD"
        "0 @I1@ INDI"
        "1 NAME John /Doe/"
        "2 DATE 12 OCT 1982"
    """
    raw = _strip_eol(line)

    if not raw.strip():
        raise GedcomSyntaxError(f"Empty or whitespace-only line at {lineno}")

    # Exports from some desktop tools carry a BOM on the first line.
    text = raw.lstrip("\ufeff").strip()
    if not text:
        raise GedcomSyntaxError(f"Empty line after BOM at {lineno}")

    # --- 1. Extract level -------------------------------------------------
    parts = text.split(None, 1)
    level_str = parts[0]
    if not (level_str.isascii() and level_str.isdigit()):
        raise GedcomSyntaxError(
            f"Line {lineno}: level is not numeric -> {level_str!r} in {raw!r}"
        )
    if len(parts) == 1:
        raise GedcomSyntaxError(
            f"Line {lineno}: missing tag (only level found) -> {raw!r}"
        )

    level = int(level_str)
    rest = parts[1]

    # --- 2. Extract optional pointer -------------------------------------
    pointer: Optional[str] = None

    if rest.startswith("@"):
        ptr_parts = rest.split(None, 1)
        if len(ptr_parts) == 1:
            raise GedcomSyntaxError(
                f"Line {lineno}: pointer present but no tag -> {raw!r}"
            )
        pointer, rest = ptr_parts

    # --- 3. Extract tag and optional value --------------------------------
    tag_parts = rest.split(None, 1)
    tag = tag_parts[0]
    value = tag_parts[1].strip() if len(tag_parts) > 1 else ""

    return RawRecord(
        lineno=lineno,
        level=level,
        pointer=pointer,
        tag=tag.upper(),
        value=value,
        raw=raw,
    )


def tokenize_lines(lines: Iterable[str]) -> Iterator[RawRecord]:
    """
    Yield a RawRecord for every well-formed line.

    Blank lines and lines that fail ``tokenize_line`` are skipped; the
    failures are logged at DEBUG level and never raised.
    """
    for lineno, raw_line in enumerate(lines, start=1):
        stripped = _strip_eol(raw_line)
        if not stripped.strip():
            continue

        try:
            yield tokenize_line(stripped, lineno=lineno)
        except GedcomSyntaxError as exc:
            log.debug("Skipping malformed line: %s", exc)


def tokenize_text(text: str) -> Iterator[RawRecord]:
    """Tokenize an in-memory document."""
    return tokenize_lines(text.splitlines())


def tokenize_file(path: Union[str, Path]) -> Iterator[RawRecord]:
    """
    Yield RawRecord objects for every well-formed line in the given file.

    Raises:
        FileNotFoundError: if `path` does not exist.
    """
    file_path = Path(path)

    if not file_path.is_file():
        raise FileNotFoundError(f"GEDCOM file not found: {file_path}")

    with file_path.open("r", encoding="utf-8", errors="replace") as f:
        yield from tokenize_lines(f)
