"""
Persistence interface consumed by the importer and tree building.

Storage itself lives outside this package (the web application's database);
anything offering these insert/delete/read calls can be passed in.
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol

from ancestry_atlas.models import FamilyLink, Member, Person, RelationshipEdge, StoredEvent


class AtlasStore(Protocol):
    def delete_people(self, owner_id: Any) -> None: ...

    def delete_family_links(self, owner_id: Any) -> None: ...

    def insert_person(self, owner_id: Any, person: Person) -> None: ...

    def insert_family_link(self, owner_id: Any, link: FamilyLink) -> None: ...

    def delete_events(self, owner_id: Any, source: str = "gedcom") -> int: ...

    def insert_event(self, event: StoredEvent) -> None: ...

    def people(self, owner_id: Any) -> List[Person]: ...

    def family_links(self, owner_id: Any) -> List[FamilyLink]: ...

    def events(self, owner_id: Any, source: Optional[str] = None) -> List[StoredEvent]: ...


class FamilyStore(Protocol):
    def members(self, family_id: Any) -> List[Member]: ...

    def relationships(self, family_id: Any) -> List[RelationshipEdge]: ...
