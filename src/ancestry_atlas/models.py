from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple


SEX_MALE = "M"
SEX_FEMALE = "F"
SEX_UNKNOWN = "unknown"

EVENT_KINDS = ("birth", "death", "burial")
RELATIONSHIP_KINDS = ("parent", "child", "spouse")

_INVERSE_RELATIONSHIP = {"parent": "child", "child": "parent", "spouse": "spouse"}


def format_display_name(given: Optional[str], surname: Optional[str]) -> str:
    """
    Join name parts and capitalize each word: ("john", "SMITH") -> "John Smith".

    Returns an empty string when neither part carries text.
    """
    words = " ".join(p for p in (given, surname) if p).split()
    return " ".join(w[:1].upper() + w[1:].lower() for w in words)


# -----------------------------
# Parsed genealogy entities
# -----------------------------

@dataclass(frozen=True, slots=True)
class EventFacts:
    """Raw date/place text recorded under a BIRT/DEAT sub-event."""
    date: Optional[str] = None
    place: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Person:
    """
    One INDI record.

    Values are kept exactly as the source gave them (trimmed); dates are
    normalized later, when events and trees are derived.
    """
    external_id: str
    given_name: str = ""
    surname: str = ""
    sex: str = SEX_UNKNOWN
    birth: EventFacts = EventFacts()
    death: EventFacts = EventFacts()
    burial_place: Optional[str] = None

    @property
    def display_name(self) -> str:
        return format_display_name(self.given_name, self.surname)


@dataclass(frozen=True, slots=True)
class FamilyLink:
    """One FAM record. ``child_ids`` keeps source order."""
    external_family_id: str
    husband_id: Optional[str] = None
    wife_id: Optional[str] = None
    child_ids: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ParsedRecords:
    persons: List[Person] = field(default_factory=list)
    family_links: List[FamilyLink] = field(default_factory=list)

    def named_persons(self) -> List[Person]:
        """Persons with at least one name part; the ones an import keeps."""
        return [p for p in self.persons if p.display_name]


# -----------------------------
# Events & geocoding
# -----------------------------

@dataclass(frozen=True, slots=True)
class DerivedEvent:
    person_display_name: str
    kind: str
    title: str
    description: str
    iso_date: str
    raw_date: Optional[str]
    place: str
    category: str

    def __post_init__(self) -> None:
        if self.kind not in EVENT_KINDS:
            raise ValueError(f"Event kind must be one of {', '.join(EVENT_KINDS)}; got {self.kind!r}")


@dataclass(frozen=True, slots=True)
class Coordinate:
    lat: float
    lon: float


@dataclass(slots=True)
class StoredEvent:
    """An application event persisted for an import owner."""
    owner_id: Any
    title: str
    description: Optional[str]
    event_date: str
    latitude: float
    longitude: float
    category: str = "other"
    source: str = "gedcom"


# -----------------------------
# Live family members
# -----------------------------

@dataclass(frozen=True, slots=True)
class Member:
    id: Any
    name: str


@dataclass(frozen=True, slots=True)
class RelationshipEdge:
    """
    Directed edge between two members.

    ``parent`` reads as "from_id is parent of to_id".
    """
    from_id: Any
    to_id: Any
    relationship: str

    def __post_init__(self) -> None:
        if self.relationship not in RELATIONSHIP_KINDS:
            raise ValueError(
                f"Relationship must be one of {', '.join(RELATIONSHIP_KINDS)}; got {self.relationship!r}"
            )

    def inverse(self) -> "RelationshipEdge":
        return RelationshipEdge(
            from_id=self.to_id,
            to_id=self.from_id,
            relationship=_INVERSE_RELATIONSHIP[self.relationship],
        )


# -----------------------------
# Results
# -----------------------------

@dataclass(slots=True)
class ImportResult:
    imported: int
    skipped: int
    people_display_names: List[str]
    people_count: int
    family_link_count: int
    message: str

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class TreeNode:
    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["TreeNode"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "attributes": dict(self.attributes),
            "children": [child.to_dict() for child in self.children],
        }

    def count(self) -> int:
        """Number of nodes in this subtree, including this one."""
        return 1 + sum(child.count() for child in self.children)
