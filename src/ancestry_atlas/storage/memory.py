from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ancestry_atlas.models import FamilyLink, Member, Person, RelationshipEdge, StoredEvent


@dataclass(slots=True)
class InMemoryStore:
    """
    In-memory store keyed by owner id.

    Used by the CLI and tests; satisfies both ``AtlasStore`` and
    ``FamilyStore``.
    """
    persons_by_owner: Dict[Any, List[Person]] = field(default_factory=dict)
    links_by_owner: Dict[Any, List[FamilyLink]] = field(default_factory=dict)
    events_by_owner: Dict[Any, List[StoredEvent]] = field(default_factory=dict)
    members_by_family: Dict[Any, List[Member]] = field(default_factory=dict)
    edges_by_family: Dict[Any, List[RelationshipEdge]] = field(default_factory=dict)

    # -------------------------------
    # Imported genealogy
    # -------------------------------
    def delete_people(self, owner_id: Any) -> None:
        self.persons_by_owner.pop(owner_id, None)

    def delete_family_links(self, owner_id: Any) -> None:
        self.links_by_owner.pop(owner_id, None)

    def insert_person(self, owner_id: Any, person: Person) -> None:
        self.persons_by_owner.setdefault(owner_id, []).append(person)

    def insert_family_link(self, owner_id: Any, link: FamilyLink) -> None:
        self.links_by_owner.setdefault(owner_id, []).append(link)

    def insert_event(self, event: StoredEvent) -> None:
        self.events_by_owner.setdefault(event.owner_id, []).append(event)

    def people(self, owner_id: Any) -> List[Person]:
        return list(self.persons_by_owner.get(owner_id, []))

    def family_links(self, owner_id: Any) -> List[FamilyLink]:
        return list(self.links_by_owner.get(owner_id, []))

    def events(self, owner_id: Any, source: Optional[str] = None) -> List[StoredEvent]:
        found = self.events_by_owner.get(owner_id, [])
        if source is None:
            return list(found)
        return [evt for evt in found if evt.source == source]

    def delete_events(self, owner_id: Any, source: str = "gedcom") -> int:
        """Remove the owner's events from one source; returns how many went."""
        found = self.events_by_owner.get(owner_id, [])
        kept = [evt for evt in found if evt.source != source]
        self.events_by_owner[owner_id] = kept
        return len(found) - len(kept)

    # -------------------------------
    # Live family members
    # -------------------------------
    def add_member(self, family_id: Any, member: Member) -> None:
        self.members_by_family.setdefault(family_id, []).append(member)

    def set_relationship(self, family_id: Any, edge: RelationshipEdge) -> None:
        """
        Record ``edge`` and its inverse, replacing whatever was declared
        between the same pair before.
        """
        pair = {edge.from_id, edge.to_id}
        kept = [
            e for e in self.edges_by_family.get(family_id, [])
            if {e.from_id, e.to_id} != pair
        ]
        kept.extend([edge, edge.inverse()])
        self.edges_by_family[family_id] = kept

    def members(self, family_id: Any) -> List[Member]:
        return list(self.members_by_family.get(family_id, []))

    def relationships(self, family_id: Any) -> List[RelationshipEdge]:
        return list(self.edges_by_family.get(family_id, []))
