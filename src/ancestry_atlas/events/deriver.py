"""
deriver.py

Person entities -> birth / death / burial event candidates.

An event is produced only when its date normalizes and its place is usable
(present and not the "?" placeholder). Burial records carry no date of their
own in the files we read, so a burial borrows the death date, falling back to
the birth date.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from ancestry_atlas.dates.normalizer import normalize_date
from ancestry_atlas.models import DerivedEvent, Person
from ancestry_atlas.places.normalizer import PLACEHOLDER


def is_placeholder(place: Optional[str]) -> bool:
    return bool(place) and place.strip() == PLACEHOLDER


def usable_place(place: Optional[str]) -> bool:
    return bool(place and place.strip()) and not is_placeholder(place)


def _birth_event(name: str, person: Person, iso: Optional[str]) -> Optional[DerivedEvent]:
    if not iso or not usable_place(person.birth.place):
        return None
    return DerivedEvent(
        person_display_name=name,
        kind="birth",
        title=f"{name} - Birth",
        description=f"Born: {person.birth.date}",
        iso_date=iso,
        raw_date=person.birth.date,
        place=person.birth.place,
        category="birth",
    )


def _death_event(name: str, person: Person, iso: Optional[str]) -> Optional[DerivedEvent]:
    if not iso or not usable_place(person.death.place):
        return None
    return DerivedEvent(
        person_display_name=name,
        kind="death",
        title=f"{name} - Death",
        description=f"Died: {person.death.date}",
        iso_date=iso,
        raw_date=person.death.date,
        place=person.death.place,
        category="death",
    )


def _burial_event(
    name: str,
    person: Person,
    birth_iso: Optional[str],
    death_iso: Optional[str],
) -> Optional[DerivedEvent]:
    iso = death_iso or birth_iso
    if not iso or not usable_place(person.burial_place):
        return None

    description = "Burial place"
    if person.death.date:
        description += f" (died: {person.death.date})"

    return DerivedEvent(
        person_display_name=name,
        kind="burial",
        title=f"{name} - Burial",
        description=description,
        iso_date=iso,
        raw_date=person.death.date or person.birth.date,
        place=person.burial_place,
        category="death",
    )


def derive_person_events(person: Person) -> List[DerivedEvent]:
    name = person.display_name
    if not name:
        return []

    birth_iso = normalize_date(person.birth.date)
    death_iso = normalize_date(person.death.date)

    candidates = (
        _birth_event(name, person, birth_iso),
        _death_event(name, person, death_iso),
        _burial_event(name, person, birth_iso, death_iso),
    )
    return [evt for evt in candidates if evt is not None]


def derive_events(persons: Iterable[Person]) -> List[DerivedEvent]:
    """Derive events for every named person, in person order."""
    events: List[DerivedEvent] = []
    for person in persons:
        events.extend(derive_person_events(person))
    return events


def count_placeholder_events(persons: Iterable[Person]) -> int:
    """
    Count events that would exist but for a "?" place.

    These never become DerivedEvents; the importer reports them as skipped.
    """
    count = 0
    for person in persons:
        if not person.display_name:
            continue
        birth_iso = normalize_date(person.birth.date)
        death_iso = normalize_date(person.death.date)
        count += bool(birth_iso) and is_placeholder(person.birth.place)
        count += bool(death_iso) and is_placeholder(person.death.place)
        count += bool(death_iso or birth_iso) and is_placeholder(person.burial_place)
    return count
