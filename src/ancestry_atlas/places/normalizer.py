"""
normalizer.py

Place clean-up ahead of geocoding.

The tables below are a short list of known problem cases from family files
(obsolete colonial names, abbreviations, bare town names the lookup service
places in the wrong country). This is not a gazetteer; add an entry when a
real place keeps failing to resolve.
"""

from __future__ import annotations

import re
from typing import List, Optional, Pattern, Tuple

PLACEHOLDER = "?"

# " - Burial ground", " - Buried at sea" ...
_ANNOTATION_SUFFIX_RE = re.compile(r"\s*-\s*(?:burial|buried|cremat\w*)\b.*$", re.IGNORECASE)

HISTORICAL_NAMES: List[Tuple[Pattern[str], str]] = [
    (re.compile(r"\bCeylon\b", re.IGNORECASE), "Sri Lanka"),
    (re.compile(r"Western Prov\.", re.IGNORECASE), "Western Province"),
    (re.compile(r"\bEngnd\b", re.IGNORECASE), "England"),
    (re.compile(r"\bBelgique\b", re.IGNORECASE), "Belgium"),
]

# Qualifiers made redundant once the historical name has been replaced.
REDUNDANT_QUALIFIERS: List[Pattern[str]] = [
    re.compile(r"\(\s*Sri Lanka\s*\)", re.IGNORECASE),
]

TOWN_DISAMBIGUATIONS = {
    "brugge": "Brugge, Belgium",
    "kolberg": "Kołobrzeg, Poland",
}


def _collapse_separators(text: str) -> str:
    text = re.sub(r",(?:\s*,)+", ",", text)
    text = re.sub(r"\s+,", ",", text)
    text = re.sub(r"^[\s,]+|[\s,]+$", "", text)
    return re.sub(r"\s+", " ", text).strip()


def normalize_place(text: Optional[str]) -> Optional[str]:
    """
    Rewrite a free-text place for a better lookup hit rate.

    Steps, in order:
        1. strip trailing dash annotations ("Kandy - Burial" -> "Kandy")
        2. historical substitutions ("Ceylon" -> "Sri Lanka")
        3. drop redundant parenthetical country qualifiers
        4. collapse repeated/trailing commas and whitespace
        5. append a country to known bare town names

    Returns None for empty input or the "?" placeholder.
    """
    if text is None:
        return None

    cleaned = str(text).strip()
    if not cleaned or cleaned == PLACEHOLDER:
        return None

    cleaned = _ANNOTATION_SUFFIX_RE.sub("", cleaned)

    for pattern, replacement in HISTORICAL_NAMES:
        cleaned = pattern.sub(replacement, cleaned)

    for pattern in REDUNDANT_QUALIFIERS:
        cleaned = pattern.sub("", cleaned)

    cleaned = _collapse_separators(cleaned)

    cleaned = TOWN_DISAMBIGUATIONS.get(cleaned.lower(), cleaned)

    if cleaned == PLACEHOLDER:
        return None
    return cleaned or None


def fallback_query(normalized: str) -> Optional[str]:
    """
    "Town, District, Region, Country" -> "Region, Country".

    Returns None when there are two segments or fewer, since the fallback
    would repeat the original query.
    """
    parts = [p.strip() for p in normalized.split(",") if p.strip()]
    if len(parts) <= 2:
        return None
    return ", ".join(parts[-2:])
