"""
builder.py

Hierarchical trees for display, from either source of relatives:

- ``build_gedcom_tree``  : imported persons + family links
- ``build_family_tree``  : live members + relationship edges

Both builds share the attachment rules in ``_Forest``:

- a child is attached under the first parent that claims it,
- an attachment that would make a node its own ancestor is skipped,
- nodes that end up without a parent are the roots, in input order.

Zero nodes gives None, one root is returned as-is, several roots are
wrapped in a synthetic root with empty attributes.
"""

from __future__ import annotations

from typing import Any, Dict, Hashable, Iterable, List, Optional

from ancestry_atlas.config import get_config
from ancestry_atlas.dates.normalizer import normalize_date
from ancestry_atlas.logging import get_logger
from ancestry_atlas.models import (
    SEX_UNKNOWN,
    FamilyLink,
    Member,
    Person,
    RelationshipEdge,
    TreeNode,
)
from ancestry_atlas.storage.base import AtlasStore, FamilyStore

log = get_logger(__name__)

DEFAULT_GEDCOM_ROOT_LABEL = "Ancestors"
DEFAULT_FAMILY_ROOT_LABEL = "Family"
UNKNOWN_NAME = "Unknown"


class _Forest:
    """
    Node table plus the parent side table for one build call.

    ``parent_of`` maps child key -> parent key and doubles as the
    "has parent" flag, so nodes themselves never carry build state.
    """

    def __init__(self) -> None:
        self.nodes: Dict[Hashable, TreeNode] = {}
        self.parent_of: Dict[Hashable, Hashable] = {}

    def add(self, key: Hashable, node: TreeNode) -> None:
        # Duplicate ids keep the first record.
        self.nodes.setdefault(key, node)

    def get(self, key: Optional[Hashable]) -> Optional[TreeNode]:
        if key is None:
            return None
        return self.nodes.get(key)

    def _is_ancestor(self, candidate: Hashable, key: Hashable) -> bool:
        """True when ``candidate`` is ``key`` or sits above it."""
        current: Optional[Hashable] = key
        while current is not None:
            if current == candidate:
                return True
            current = self.parent_of.get(current)
        return False

    def attach(self, parent_key: Hashable, child_key: Hashable) -> bool:
        if parent_key not in self.nodes or child_key not in self.nodes:
            return False
        if child_key in self.parent_of:
            return False
        if self._is_ancestor(child_key, parent_key):
            log.warning("Skipping %r -> %r: attachment would form a cycle", parent_key, child_key)
            return False

        self.nodes[parent_key].children.append(self.nodes[child_key])
        self.parent_of[child_key] = parent_key
        return True

    def roots(self) -> List[TreeNode]:
        return [node for key, node in self.nodes.items() if key not in self.parent_of]

    def result(self, root_label: str) -> Optional[TreeNode]:
        roots = self.roots()
        if not roots:
            return None
        if len(roots) == 1:
            return roots[0]
        return TreeNode(name=root_label, attributes={}, children=roots)


def _root_label(key: str, given: Optional[str], default: str) -> str:
    if given:
        return given
    settings = get_config().tree or {}
    return settings.get(key) or default


# ---------------------------------------------------------------------------
# Imported records
# ---------------------------------------------------------------------------

def person_attributes(person: Person) -> Dict[str, str]:
    birth_iso = normalize_date(person.birth.date) or ""
    death_iso = normalize_date(person.death.date) or ""
    return {
        "born": birth_iso[:4],
        "died": death_iso[:4],
        "sex": "" if person.sex == SEX_UNKNOWN else person.sex,
        "birthPlace": person.birth.place or "",
        "deathPlace": person.death.place or "",
        "birthDate": birth_iso,
        "deathDate": death_iso,
    }


def _merge_spouse(husband: TreeNode, wife: TreeNode) -> None:
    husband.attributes["spouse"] = wife.name

    born = wife.attributes.get("born", "")
    died = wife.attributes.get("died", "")
    if born or died:
        husband.attributes["spouseYears"] = f"{born or '?'} - {died or '?'}"
    else:
        husband.attributes.pop("spouseYears", None)


def build_gedcom_tree(
    persons: Iterable[Person],
    family_links: Iterable[FamilyLink],
    root_label: Optional[str] = None,
) -> Optional[TreeNode]:
    """
    Build the ancestor tree from imported records.

    Children hang under the husband of their family, or under the wife when
    the link names no husband. A named husband who is not among ``persons``
    leaves the children as roots. When both spouses are known, the wife
    is recorded on the husband node as ``spouse`` / ``spouseYears``.
    """
    forest = _Forest()
    for person in persons:
        forest.add(
            person.external_id,
            TreeNode(
                name=person.display_name or UNKNOWN_NAME,
                attributes=person_attributes(person),
            ),
        )

    for link in family_links:
        husband = forest.get(link.husband_id)
        wife = forest.get(link.wife_id)

        if husband is not None and wife is not None:
            _merge_spouse(husband, wife)

        parent_key = link.husband_id or link.wife_id
        if forest.get(parent_key) is None:
            continue

        for child_id in link.child_ids:
            forest.attach(parent_key, child_id)

    log.debug("GEDCOM tree: %d node(s), %d root(s)", len(forest.nodes), len(forest.roots()))
    return forest.result(
        _root_label("gedcom_root_label", root_label, DEFAULT_GEDCOM_ROOT_LABEL)
    )


# ---------------------------------------------------------------------------
# Live family members
# ---------------------------------------------------------------------------

def build_family_tree(
    members: Iterable[Member],
    relationships: Iterable[RelationshipEdge],
    root_label: Optional[str] = None,
) -> Optional[TreeNode]:
    """Build the tree of live members; ``parent`` edges attach, ``spouse`` edges annotate."""
    forest = _Forest()
    for member in members:
        forest.add(
            member.id,
            TreeNode(name=member.name, attributes={"memberId": str(member.id)}),
        )

    for edge in relationships:
        if edge.relationship == "parent":
            forest.attach(edge.from_id, edge.to_id)
        elif edge.relationship == "spouse":
            node = forest.get(edge.from_id)
            partner = forest.get(edge.to_id)
            if node is not None and partner is not None:
                node.attributes.setdefault("spouse", partner.name)

    return forest.result(
        _root_label("family_root_label", root_label, DEFAULT_FAMILY_ROOT_LABEL)
    )


def build_owner_tree(store: AtlasStore, owner_id: Any, root_label: Optional[str] = None) -> Optional[TreeNode]:
    """Tree of whatever the last import stored for ``owner_id``."""
    return build_gedcom_tree(store.people(owner_id), store.family_links(owner_id), root_label)


def build_member_tree(store: FamilyStore, family_id: Any, root_label: Optional[str] = None) -> Optional[TreeNode]:
    """Tree of the live members of ``family_id``."""
    return build_family_tree(store.members(family_id), store.relationships(family_id), root_label)
