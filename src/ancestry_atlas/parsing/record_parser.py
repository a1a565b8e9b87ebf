"""
record_parser.py

Level-tagged text -> Person / FamilyLink entities.

The parser is a small state machine. Each line is folded into an immutable
``ParserState`` by ``step``; nothing is mutated in place, so whatever a new
level-0 record resets is visible in one spot (``_start_record``).

States
------
* Outside            : ``record is None`` (HEAD, SOUR, TRLR, unknown records)
* InPerson(context)  : ``record`` is a Person; ``context`` in
                       {name, birth, death, burial, None}
* InFamily           : ``record`` is a FamilyLink

Only a subset of the format is read: names, sex, birth/death date and place,
burial place, and husband/wife/child links. Everything else is ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Tuple, Union

from ancestry_atlas.loader.tokenizer import RawRecord, tokenize_text
from ancestry_atlas.logging import get_logger
from ancestry_atlas.models import (
    SEX_FEMALE,
    SEX_MALE,
    SEX_UNKNOWN,
    EventFacts,
    FamilyLink,
    ParsedRecords,
    Person,
)

log = get_logger(__name__)

Record = Union[Person, FamilyLink]

CONTEXT_NAME = "name"
CONTEXT_BIRTH = "birth"
CONTEXT_DEATH = "death"
CONTEXT_BURIAL = "burial"

PERSON_CONTEXTS = {
    "NAME": CONTEXT_NAME,
    "BIRT": CONTEXT_BIRTH,
    "DEAT": CONTEXT_DEATH,
    "BURI": CONTEXT_BURIAL,
}

_NAME_VALUE_RE = re.compile(r"^(?P<given>[^/]*)(?:/(?P<surname>[^/]*)/?)?")


@dataclass(frozen=True)
class ParserState:
    record: Optional[Record] = None
    context: Optional[str] = None


OUTSIDE = ParserState()


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def clean_surname(value: str) -> str:
    """Drop parenthetical markers: "(Martha)" -> "Martha"."""
    return re.sub(r"[()]", "", value).strip()


def split_name_value(value: str) -> Tuple[str, str]:
    """
    Split a NAME payload into (given, surname).

        "John /Smith/"   -> ("John", "Smith")
        "/Smith/"        -> ("", "Smith")
        "John"           -> ("John", "")
    """
    m = _NAME_VALUE_RE.match(value.strip())
    if not m:
        return "", ""
    given = " ".join((m.group("given") or "").split())
    surname = clean_surname(m.group("surname") or "")
    return given, surname


def _sex_from(value: str) -> str:
    code = value.strip()[:1].upper()
    if code in (SEX_MALE, SEX_FEMALE):
        return code
    return SEX_UNKNOWN


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def _start_record(line: RawRecord) -> ParserState:
    if not line.pointer:
        return OUTSIDE
    if line.tag == "INDI":
        return ParserState(record=Person(external_id=line.pointer))
    if line.tag == "FAM":
        return ParserState(record=FamilyLink(external_family_id=line.pointer))
    return OUTSIDE


def _person_level1(state: ParserState, person: Person, line: RawRecord) -> ParserState:
    if line.tag == "SEX":
        return replace(state, record=replace(person, sex=_sex_from(line.value)), context=None)

    context = PERSON_CONTEXTS.get(line.tag)

    if context == CONTEXT_NAME:
        # Each NAME block replaces the name; its GIVN/SURN then refine it.
        given, surname = split_name_value(line.value)
        person = replace(person, given_name=given, surname=surname)

    return replace(state, record=person, context=context)


def _person_level2(state: ParserState, person: Person, line: RawRecord) -> ParserState:
    context = state.context
    value = line.value

    if not value:
        return state

    if context == CONTEXT_NAME:
        if line.tag == "GIVN":
            person = replace(person, given_name=value)
        elif line.tag == "SURN":
            person = replace(person, surname=clean_surname(value))
    elif context in (CONTEXT_BIRTH, CONTEXT_DEATH):
        facts: EventFacts = getattr(person, context)
        if line.tag == "DATE":
            facts = replace(facts, date=value)
        elif line.tag == "PLAC":
            facts = replace(facts, place=value)
        person = replace(person, **{context: facts})
    elif context == CONTEXT_BURIAL:
        if line.tag == "PLAC":
            person = replace(person, burial_place=value)

    return replace(state, record=person)


def _family_level1(state: ParserState, family: FamilyLink, line: RawRecord) -> ParserState:
    ref = line.value or line.pointer
    if not ref:
        return state

    if line.tag == "HUSB":
        family = replace(family, husband_id=ref)
    elif line.tag == "WIFE":
        family = replace(family, wife_id=ref)
    elif line.tag == "CHIL":
        family = replace(family, child_ids=family.child_ids + (ref,))
    else:
        return state

    return replace(state, record=family)


def step(state: ParserState, line: RawRecord) -> Tuple[ParserState, Optional[Record]]:
    """
    Fold one line into the parser state.

    Returns the new state and the record this line completed, if any. A
    record is completed when the next level-0 line arrives.
    """
    if line.level == 0:
        return _start_record(line), state.record

    record = state.record

    if isinstance(record, Person):
        if line.level == 1:
            return _person_level1(state, record, line), None
        if line.level == 2:
            return _person_level2(state, record, line), None
    elif isinstance(record, FamilyLink) and line.level == 1:
        return _family_level1(state, record, line), None

    return state, None


# ---------------------------------------------------------------------------
# Main public API
# ---------------------------------------------------------------------------

def parse_lines(lines: Iterable[RawRecord]) -> ParsedRecords:
    persons: List[Person] = []
    family_links: List[FamilyLink] = []

    def _collect(record: Optional[Record]) -> None:
        if isinstance(record, Person):
            persons.append(record)
        elif isinstance(record, FamilyLink):
            family_links.append(record)

    state = OUTSIDE
    for line in lines:
        state, completed = step(state, line)
        _collect(completed)
    _collect(state.record)

    log.debug("Parsed %d person(s) and %d family link(s)", len(persons), len(family_links))
    return ParsedRecords(persons=persons, family_links=family_links)


def parse_records(text: str) -> ParsedRecords:
    """
    Parse raw level-tagged text into persons and family links.

    Malformed lines are skipped. Output lists keep source order.
    """
    return parse_lines(tokenize_text(text))
