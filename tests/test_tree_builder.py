# tests/test_tree_builder.py

from __future__ import annotations

from ancestry_atlas.models import EventFacts, FamilyLink, Member, Person, RelationshipEdge
from ancestry_atlas.parsing import parse_records
from ancestry_atlas.storage import InMemoryStore
from ancestry_atlas.tree import build_family_tree, build_gedcom_tree, build_member_tree, build_owner_tree
from ancestry_atlas.utils import mock_file_path


def person(pid, given="", surname="", sex="unknown", birth=(None, None), death=(None, None)):
    return Person(
        external_id=pid,
        given_name=given,
        surname=surname,
        sex=sex,
        birth=EventFacts(*birth),
        death=EventFacts(*death),
    )


def fam(fid, husband=None, wife=None, children=()):
    return FamilyLink(fid, husband, wife, tuple(children))


def names(node):
    return [child.name for child in node.children]


# ---------------------------------------------------------------------------
# Imported records
# ---------------------------------------------------------------------------

def test_empty_input_gives_none():
    assert build_gedcom_tree([], []) is None


def test_single_root_is_returned_without_wrapper():
    persons = [person("@I1@", "Dad", "Lee"), person("@I2@", "Kid", "Lee")]
    tree = build_gedcom_tree(persons, [fam("@F1@", husband="@I1@", children=["@I2@", "@I404@"])])

    assert tree.name == "Dad Lee"
    assert names(tree) == ["Kid Lee"]
    # unknown child id is dropped
    assert tree.count() == len(persons)


def test_several_roots_get_synthetic_root_in_input_order():
    persons = [person("@I3@", "C"), person("@I1@", "A"), person("@I2@", "B")]
    tree = build_gedcom_tree(persons, [])

    assert tree.name == "Ancestors"
    assert tree.attributes == {}
    assert names(tree) == ["C", "A", "B"]


def test_root_label_override():
    tree = build_gedcom_tree([person("@I1@", "A"), person("@I2@", "B")], [], root_label="Everyone")
    assert tree.name == "Everyone"


def test_node_attributes():
    p = person(
        "@I1@", "john", "SMITH", sex="M",
        birth=("12 OCT 1982", "Sydney"),
        death=("BET 1700 AND 1710", "Perth"),
    )
    tree = build_gedcom_tree([p], [])

    assert tree.name == "John Smith"
    assert tree.attributes == {
        "born": "1982",
        "died": "",
        "sex": "M",
        "birthPlace": "Sydney",
        "deathPlace": "Perth",
        "birthDate": "1982-10-12",
        "deathDate": "",
    }


def test_nameless_person_is_unknown_with_empty_sex():
    tree = build_gedcom_tree([person("@I1@")], [])
    assert tree.name == "Unknown"
    assert tree.attributes["sex"] == ""


def test_wife_is_parent_when_no_husband():
    persons = [person("@I2@", "Mum"), person("@I3@", "Kid")]
    tree = build_gedcom_tree(persons, [fam("@F1@", wife="@I2@", children=["@I3@"])])

    assert tree.name == "Mum"
    assert names(tree) == ["Kid"]


def test_unknown_husband_leaves_children_as_roots():
    persons = [person("@W@", "Mary", "Lee"), person("@C@", "Kid", "Lee")]
    tree = build_gedcom_tree(persons, [fam("@F1@", husband="@GONE@", wife="@W@", children=["@C@"])])

    assert tree.name == "Ancestors"
    assert names(tree) == ["Mary Lee", "Kid Lee"]
    assert tree.children[0].children == []


def test_family_without_known_parents_attaches_nothing():
    persons = [person("@I3@", "Kid"), person("@I4@", "Other")]
    tree = build_gedcom_tree(persons, [fam("@F1@", husband="@I404@", children=["@I3@"])])

    assert names(tree) == ["Kid", "Other"]


def test_spouse_attributes_on_husband():
    persons = [
        person("@I1@", "Dad", birth=("1900", None)),
        person("@I2@", "Mum", death=("1970", None)),
        person("@I3@", "Kid"),
    ]
    tree = build_gedcom_tree(persons, [fam("@F1@", "@I1@", "@I2@", ["@I3@"])])

    dad = tree.children[0]
    assert tree.name == "Ancestors"
    assert dad.attributes["spouse"] == "Mum"
    assert dad.attributes["spouseYears"] == "? - 1970"
    assert names(dad) == ["Kid"]
    # mum stays a root of her own
    assert names(tree) == ["Dad", "Mum"]


def test_spouse_years_absent_when_wife_has_no_dates():
    persons = [person("@I1@", "Dad"), person("@I2@", "Mum")]
    tree = build_gedcom_tree(persons, [fam("@F1@", "@I1@", "@I2@")])

    dad = tree.children[0]
    assert dad.attributes["spouse"] == "Mum"
    assert "spouseYears" not in dad.attributes
    # independent of the husband's own (empty) dates
    assert dad.attributes["born"] == ""


def test_first_family_link_wins_for_child():
    persons = [person("@I1@", "Dad"), person("@I2@", "Step"), person("@I3@", "Kid")]
    links = [
        fam("@F1@", husband="@I1@", children=["@I3@"]),
        fam("@F2@", husband="@I2@", children=["@I3@"]),
    ]
    tree = build_gedcom_tree(persons, links)

    dad, step = tree.children
    assert names(dad) == ["Kid"]
    assert names(step) == []
    assert tree.count() == 4


def test_cycle_is_broken_and_roots_remain():
    persons = [person("@I1@", "A"), person("@I2@", "B")]
    links = [
        fam("@F1@", husband="@I1@", children=["@I2@"]),
        fam("@F2@", husband="@I2@", children=["@I1@"]),
    ]
    tree = build_gedcom_tree(persons, links)

    assert tree.name == "A"
    assert names(tree) == ["B"]
    assert tree.children[0].children == []


def test_self_parent_is_ignored():
    tree = build_gedcom_tree([person("@I1@", "A")], [fam("@F1@", husband="@I1@", children=["@I1@"])])
    assert tree.name == "A"
    assert tree.children == []


def test_sample_file_tree():
    parsed = parse_records(mock_file_path("sample.ged").read_text(encoding="utf-8"))
    tree = build_gedcom_tree(parsed.persons, parsed.family_links)

    assert names(tree) == ["William Perera", "Maria De Silva", "Otto Krause"]
    william = tree.children[0]
    assert names(william) == ["John Perera", "Anna Martha"]
    assert william.attributes["spouse"] == "Maria De Silva"
    assert william.attributes["spouseYears"] == "1850 - ?"
    assert william.attributes["died"] == "1901"


def test_to_dict_shape():
    tree = build_gedcom_tree([person("@I1@", "A")], [])
    data = tree.to_dict()
    assert set(data) == {"name", "attributes", "children"}
    assert data["children"] == []


def test_owner_tree_from_store():
    store = InMemoryStore()
    store.insert_person(1, person("@I1@", "A"))
    store.insert_person(2, person("@I1@", "Other owner"))

    assert build_owner_tree(store, 1).name == "A"
    assert build_owner_tree(store, 3) is None


# ---------------------------------------------------------------------------
# Live family members
# ---------------------------------------------------------------------------

def test_family_tree_empty():
    assert build_family_tree([], []) is None


def test_family_tree_parent_edges_and_spouse():
    store = InMemoryStore()
    for member in (Member(1, "Grandma"), Member(2, "Mum"), Member(3, "Me"), Member(4, "Partner")):
        store.add_member("fam", member)
    store.set_relationship("fam", RelationshipEdge(1, 2, "parent"))
    store.set_relationship("fam", RelationshipEdge(2, 3, "parent"))
    store.set_relationship("fam", RelationshipEdge(3, 4, "spouse"))

    tree = build_family_tree(store.members("fam"), store.relationships("fam"))

    assert tree.name == "Family"
    assert names(tree) == ["Grandma", "Partner"]
    grandma = tree.children[0]
    assert grandma.attributes == {"memberId": "1"}
    me = grandma.children[0].children[0]
    assert me.name == "Me"
    assert me.attributes["spouse"] == "Partner"
    assert tree.children[1].attributes["spouse"] == "Me"


def test_family_tree_child_edges_do_not_attach():
    members = [Member(1, "A"), Member(2, "B")]
    tree = build_family_tree(members, [RelationshipEdge(2, 1, "child")])
    assert names(tree) == ["A", "B"]


def test_family_tree_first_spouse_wins():
    members = [Member(1, "A"), Member(2, "B"), Member(3, "C")]
    edges = [RelationshipEdge(1, 2, "spouse"), RelationshipEdge(1, 3, "spouse")]
    tree = build_family_tree(members, edges)
    assert tree.children[0].attributes["spouse"] == "B"


def test_family_tree_single_member():
    tree = build_family_tree([Member(5, "Solo")], [RelationshipEdge(5, 99, "parent")])
    assert tree.name == "Solo"
    assert tree.attributes == {"memberId": "5"}


def test_member_tree_from_store():
    store = InMemoryStore()
    store.add_member("fam", Member(1, "Dad"))
    store.add_member("fam", Member(2, "Kid"))
    store.add_member("other", Member(3, "Stranger"))
    store.set_relationship("fam", RelationshipEdge(1, 2, "parent"))

    tree = build_member_tree(store, "fam")

    assert tree.name == "Dad"
    assert names(tree) == ["Kid"]
    assert build_member_tree(store, "missing") is None
