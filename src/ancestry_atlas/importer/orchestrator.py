from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ancestry_atlas.core.exceptions import ImportFailedError
from ancestry_atlas.events.deriver import count_placeholder_events, derive_events
from ancestry_atlas.geocoding.service import GeocodingService, ProgressCallback
from ancestry_atlas.logging import get_logger
from ancestry_atlas.models import (
    Coordinate,
    DerivedEvent,
    FamilyLink,
    ImportResult,
    Person,
    StoredEvent,
)
from ancestry_atlas.parsing.record_parser import parse_records
from ancestry_atlas.storage.base import AtlasStore

EVENT_SOURCE = "gedcom"


class ImportOrchestrator:
    """
    Runs one import for one owner:

        parse -> replace stored people/family links -> derive events
              -> geocode distinct places -> persist events that resolved

    A place that fails to geocode only skips its events. Dated events whose
    place is the "?" placeholder are never derived but are counted as skipped. Anything that stops
    the import from running at all surfaces as ImportFailedError.
    """

    def __init__(
        self,
        store: AtlasStore,
        geocoder: GeocodingService,
        on_progress: Optional[ProgressCallback] = None,
    ):
        self.store = store
        self.geocoder = geocoder
        self.on_progress = on_progress
        self.log = get_logger(__name__)

    # ---------------------------------------------------------
    # Entry points
    # ---------------------------------------------------------
    def import_from(self, text: Union[str, bytes], owner_id: Any) -> ImportResult:
        self.log.info("Import starting for owner %s", owner_id)

        try:
            result = self._run(self._decode(text), owner_id)
        except Exception as exc:
            self.log.exception("Import failed for owner %s", owner_id)
            raise ImportFailedError(f"Failed to import GEDCOM data: {exc}") from exc

        self.log.info("Import complete for owner %s: %s", owner_id, result.message)
        return result

    def import_file(self, path: Union[str, Path], owner_id: Any) -> ImportResult:
        file_path = Path(path)
        try:
            data = file_path.read_bytes()
        except OSError as exc:
            self.log.error("Cannot read %s: %s", file_path, exc)
            raise ImportFailedError(f"Cannot read {file_path}: {exc}") from exc
        return self.import_from(data, owner_id)

    def clear(self, owner_id: Any) -> int:
        """
        Remove everything imports stored for ``owner_id``: people, family
        links and imported events. Returns the number of events removed.
        """
        try:
            self.store.delete_family_links(owner_id)
            self.store.delete_people(owner_id)
            removed = self.store.delete_events(owner_id, EVENT_SOURCE)
        except Exception as exc:
            self.log.exception("Clearing imported data failed for owner %s", owner_id)
            raise ImportFailedError(f"Failed to clear GEDCOM data: {exc}") from exc

        self.log.info("Cleared imported data for owner %s (%d events)", owner_id, removed)
        return removed

    # ---------------------------------------------------------
    # Steps
    # ---------------------------------------------------------
    @staticmethod
    def _decode(text: Union[str, bytes]) -> str:
        if isinstance(text, bytes):
            return text.decode("utf-8", errors="replace")
        if isinstance(text, str):
            return text
        raise TypeError(f"expected str or bytes, got {type(text).__name__}")

    def _replace_records(self, owner_id: Any, persons: List[Person], links: List[FamilyLink]) -> None:
        self.store.delete_family_links(owner_id)
        self.store.delete_people(owner_id)

        for person in persons:
            self.store.insert_person(owner_id, person)
        for link in links:
            self.store.insert_family_link(owner_id, link)

        self.log.info(
            "Stored %d people and %d family links for owner %s",
            len(persons),
            len(links),
            owner_id,
        )

    def _persist_events(
        self,
        owner_id: Any,
        events: List[DerivedEvent],
        coords: Dict[str, Coordinate],
    ) -> Tuple[int, int, List[str]]:
        """Persist events whose place resolved. Returns (imported, skipped, names)."""
        imported = 0
        skipped = 0
        people = set()

        for evt in events:
            coord = coords.get(evt.place)
            if coord is None:
                self.log.debug("Skipping %r: place %r did not resolve", evt.title, evt.place)
                skipped += 1
                continue

            self.store.insert_event(
                StoredEvent(
                    owner_id=owner_id,
                    title=evt.title,
                    description=evt.description or None,
                    event_date=evt.iso_date,
                    latitude=coord.lat,
                    longitude=coord.lon,
                    category=evt.category or "other",
                    source=EVENT_SOURCE,
                )
            )
            imported += 1
            people.add(evt.person_display_name)

        return imported, skipped, sorted(people)

    def _run(self, text: str, owner_id: Any) -> ImportResult:
        parsed = parse_records(text)
        persons = parsed.named_persons()
        if len(persons) < len(parsed.persons):
            self.log.info("Dropping %d record(s) without a name", len(parsed.persons) - len(persons))
        people_count = len(persons)
        link_count = len(parsed.family_links)
        stored = f"Stored {people_count} people and {link_count} family links."

        self._replace_records(owner_id, persons, parsed.family_links)

        events = derive_events(persons)
        unlocatable = count_placeholder_events(persons)
        self.log.info(
            "Derived %d event(s) from %d people (%d with a \"?\" place)",
            len(events),
            people_count,
            unlocatable,
        )

        if not events and not unlocatable:
            self.store.delete_events(owner_id, EVENT_SOURCE)
            return ImportResult(
                imported=0,
                skipped=0,
                people_display_names=[],
                people_count=people_count,
                family_link_count=link_count,
                message=f"No geocodable events found. {stored}",
            )

        coords: Dict[str, Coordinate] = {}
        if events:
            coords = self.geocoder.resolve_all(
                (evt.place for evt in events),
                on_progress=self.on_progress,
            )

        self.store.delete_events(owner_id, EVENT_SOURCE)
        imported, skipped, names = self._persist_events(owner_id, events, coords)

        return ImportResult(
            imported=imported,
            skipped=skipped + unlocatable,
            people_display_names=names,
            people_count=people_count,
            family_link_count=link_count,
            message=f"Successfully imported {imported} events for {len(names)} people. {stored}",
        )
