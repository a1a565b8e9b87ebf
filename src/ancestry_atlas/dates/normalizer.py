# src/ancestry_atlas/dates/normalizer.py

from __future__ import annotations

import datetime
import re
from typing import Optional


# ---------------------------------------------------------------------------
# Month helpers
# ---------------------------------------------------------------------------

MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "sept": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}


# ---------------------------------------------------------------------------
# Qualifiers
# ---------------------------------------------------------------------------

# Leading words that only soften a single-point date; the point itself is kept.
QUALIFIERS = (
    "about",
    "abt",
    "circa",
    "ca",
    "c",
    "before",
    "bef",
    "after",
    "aft",
    "estimated",
    "est",
    "calculated",
    "cal",
)

_QUALIFIER_RE = re.compile(
    r"^(?:" + "|".join(QUALIFIERS) + r")(?![a-z])\.?\s*",
    re.IGNORECASE,
)

_YEAR_RE = re.compile(r"^(\d{4})$")
_DASHED_RE = re.compile(r"^(\d{1,2})-([a-z]+)-(\d{4})$", re.IGNORECASE)
_DAY_MONTH_YEAR_RE = re.compile(r"^(\d{1,2})\s+([a-z]+)\s+(\d{4})$", re.IGNORECASE)
_MONTH_DAY_YEAR_RE = re.compile(r"^([a-z]+)\s+(\d{1,2}),?\s+(\d{4})$", re.IGNORECASE)
_MONTH_YEAR_RE = re.compile(r"^([a-z]+)\s+(\d{4})$", re.IGNORECASE)


def strip_qualifier(text: str) -> str:
    """Remove one leading qualifier such as ``ABT``, ``Abt.`` or ``circa``."""
    return _QUALIFIER_RE.sub("", text.strip(), count=1).strip()


def _iso(year: str, month_token: str, day: str | int) -> Optional[str]:
    month = MONTHS.get(month_token.lower())
    if month is None:
        return None
    try:
        point = datetime.date(int(year), month, int(day))
    except ValueError:
        return None
    return point.isoformat()


# ---------------------------------------------------------------------------
# Main public API
# ---------------------------------------------------------------------------

def normalize_date(text: Optional[str]) -> Optional[str]:
    """
    Turn a free-text date into a full ISO date (``YYYY-MM-DD``) or None.

    Patterns, first match wins:
        '1567'          -> '1567-01-01'
        '01-Feb-1837'   -> '1837-02-01'
        '12 Oct 1982'   -> '1982-10-12'
        'May 12, 1805'  -> '1805-05-12'
        'Jan 1900'      -> '1900-01-01'

    Coarser dates are padded to the first day of the year/month. Ranges
    ('BET 1700 AND 1710', 'FROM .. TO ..'), calendar escapes and anything
    else unrecognized yield None rather than a guess.
    """
    if not text:
        return None

    cleaned = strip_qualifier(str(text))
    if not cleaned or cleaned.lower() == "unknown":
        return None

    m = _YEAR_RE.match(cleaned)
    if m:
        return f"{m.group(1)}-01-01"

    m = _DASHED_RE.match(cleaned)
    if m:
        iso = _iso(m.group(3), m.group(2), m.group(1))
        if iso:
            return iso

    m = _DAY_MONTH_YEAR_RE.match(cleaned)
    if m:
        iso = _iso(m.group(3), m.group(2), m.group(1))
        if iso:
            return iso

    m = _MONTH_DAY_YEAR_RE.match(cleaned)
    if m:
        iso = _iso(m.group(3), m.group(1), m.group(2))
        if iso:
            return iso

    m = _MONTH_YEAR_RE.match(cleaned)
    if m:
        return _iso(m.group(2), m.group(1), 1)

    return None


def year_of(text: Optional[str]) -> str:
    """Four-digit year of a normalizable date, or an empty string."""
    iso = normalize_date(text)
    return iso[:4] if iso else ""
