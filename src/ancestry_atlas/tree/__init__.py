from ancestry_atlas.tree.builder import (
    build_family_tree,
    build_gedcom_tree,
    build_member_tree,
    build_owner_tree,
    person_attributes,
)

__all__ = [
    "build_family_tree",
    "build_gedcom_tree",
    "build_member_tree",
    "build_owner_tree",
    "person_attributes",
]
