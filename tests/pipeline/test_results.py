"""Test result filtering and annotation."""

import pytest
from pydantic import ValidationError

from dnatri.core.groups import Annotation, make_group
from dnatri.pipeline.results import GroupFilter, attach_annotation, filter_groups

pytestmark = pytest.mark.unit


@pytest.fixture
def groups(make_record):
    def group(chromosome, names, size, score):
        g = make_group(chromosome, [
            make_record(n, 100 + i, 200 + i, chromosome=chromosome, size_cm=size)
            for i, n in enumerate(names)
        ])
        g.confidence_score = score
        return g

    return [
        group(1, ["Alice", "Bob", "Carl"], 10.0, 40),
        group(2, ["Dina", "Ed", "Fay", "Gus"], 20.0, 70),
        group(3, ["Hal", "Ivy"], 30.0, 55),
    ]


def test_no_criteria_keeps_everything(groups):
    assert filter_groups(groups, GroupFilter()) == groups


def test_filter_by_chromosome(groups):
    assert [g.chromosome for g in filter_groups(groups, GroupFilter(chromosome=2))] == [2]


def test_filter_by_size_and_matches(groups):
    selected = filter_groups(groups, GroupFilter(min_size=50, max_size=70, min_matches=2, max_matches=3))
    assert [g.chromosome for g in selected] == [3]


def test_filter_by_confidence(groups):
    assert [g.chromosome for g in filter_groups(groups, GroupFilter(confidence_threshold=55))] == [2, 3]


def test_search_matches_member_names_and_annotations(groups):
    attach_annotation(groups, groups[0].group_id, Annotation(tags=["Maternal"]))
    assert filter_groups(groups, GroupFilter(search_term="ivy")) == [groups[2]]
    assert filter_groups(groups, GroupFilter(search_term="MATERNAL")) == [groups[0]]


def test_sorting(groups):
    by_confidence = filter_groups(groups, GroupFilter(sort_by="confidence", sort_order="desc"))
    assert [g.confidence_score for g in by_confidence] == [70, 55, 40]
    by_matches = filter_groups(groups, GroupFilter(sort_by="matches"))
    assert [g.member_count for g in by_matches] == [2, 3, 4]


def test_filter_does_not_change_ids(groups):
    ids = [g.group_id for g in groups]
    filter_groups(groups, GroupFilter(sort_by="size", sort_order="desc"))
    assert [g.group_id for g in groups] == ids


def test_invalid_ranges_rejected():
    with pytest.raises(ValidationError):
        GroupFilter(min_size=10, max_size=5)
    with pytest.raises(ValidationError):
        GroupFilter(sort_by="name")


def test_attach_annotation_by_id(groups):
    annotation = Annotation(notes="Smith line", research_status="in-progress")
    target = attach_annotation(groups, groups[1].group_id, annotation)

    assert target is groups[1]
    assert groups[1].annotation.research_status == "in-progress"
    assert groups[1].annotation.last_modified.tzinfo is not None


def test_attach_annotation_unknown_id(groups):
    with pytest.raises(KeyError):
        attach_annotation(groups, "nope", Annotation())
