"""Test pedigree cross-referencing and ancestor splitting."""

import pytest

from dnatri.core.groups import make_group
from dnatri.core.tree import GenealogicalTree
from dnatri.dna.crossref import TreeCrossReferencer, candidate_surnames

pytestmark = pytest.mark.unit


@pytest.fixture
def tree():
    return GenealogicalTree.from_dict({
        "individuals": [
            {"id": "I1", "name": "Jane Doe", "surnames": ["Doe"], "birthDate": "1850"},
            {"id": "I2", "name": "John Roe", "surnames": ["Roe"]},
            {"id": "I3", "name": "Mary Smith", "surnames": ["Smith", "Smyth"]},
        ],
        "relationships": [
            {"id": "R1", "individual1": "I1", "individual2": "I2", "relationshipType": "spouse"},
        ],
    })


@pytest.fixture
def mixed_group(make_record):
    return make_group(1, [
        make_record("Alice Doe", 100, 200),
        make_record("Bob Doe", 110, 210),
        make_record("Carl Roe", 120, 220),
    ])


def test_tree_from_dict(tree):
    assert len(tree) == 3
    assert tree.individuals[0].birth_date == "1850"
    assert tree.relationships[0].kind == "spouse"
    assert tree.surnames() == {"doe", "roe", "smith", "smyth"}


def test_candidate_surnames():
    assert candidate_surnames("Alice Doe", ["Smith", " "]) == {"doe", "smith"}
    assert candidate_surnames("", []) == set()


def test_match_by_surname(tree):
    match = TreeCrossReferencer(tree).match_identity("Alice Doe")
    assert match.individuals == ("Jane Doe",)
    assert match.surnames == ("doe",)


def test_match_by_full_name(tree):
    match = TreeCrossReferencer(tree).match_identity("John Roe")
    assert "John Roe" in match.individuals


def test_match_by_explicit_surname(tree):
    match = TreeCrossReferencer(tree).match_identity("Pat Jones", ["Smyth"])
    assert match.individuals == ("Mary Smith",)


def test_no_match(tree):
    match = TreeCrossReferencer(tree).match_identity("Pat Jones")
    assert match.is_empty


def test_split_keeps_pair_and_drops_singleton(tree, mixed_group):
    xref = TreeCrossReferencer(tree)
    matches = xref.enrich(mixed_group.members)

    groups = xref.split_by_ancestor([mixed_group], matches, minimum_matches=2)

    assert len(groups) == 1
    group = groups[0]
    assert group.ancestor == "Jane Doe"
    assert [m.display_name for m in group.members] == ["Alice Doe", "Bob Doe"]
    assert (group.start, group.end) == (110, 200)
    assert group.total_size_cm == pytest.approx(20.0)
    assert group.group_id != mixed_group.group_id


def test_split_does_not_modify_input(tree, mixed_group):
    xref = TreeCrossReferencer(tree)
    matches = xref.enrich(mixed_group.members)
    xref.split_by_ancestor([mixed_group], matches, minimum_matches=2)
    assert mixed_group.member_count == 3
    assert mixed_group.ancestor is None


def test_groups_without_references_pass_through(make_record):
    tree = GenealogicalTree.from_dict({"individuals": [{"id": "I1", "name": "Zed Zulu", "surnames": ["Zulu"]}]})
    group = make_group(1, [make_record("Alice Doe", 1, 10), make_record("Bob Doe", 2, 10)])
    xref = TreeCrossReferencer(tree)

    groups = xref.split_by_ancestor([group], xref.enrich(group.members), minimum_matches=2)

    assert groups == [group]


def test_annotate_sets_matches_and_ancestors(tree, mixed_group):
    xref = TreeCrossReferencer(tree)
    matches = xref.enrich(mixed_group.members)
    xref.annotate([mixed_group], matches)

    assert {m.identity for m in mixed_group.tree_matches} == {"Alice Doe", "Bob Doe", "Carl Roe"}
    assert mixed_group.common_ancestors == ["Jane Doe", "John Roe"]
    assert mixed_group.primary_ancestor == "Jane Doe"
