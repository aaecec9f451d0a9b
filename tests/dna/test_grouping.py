"""Test per-chromosome overlap grouping."""

import numpy as np
import pytest

from dnatri.dna import grouping
from dnatri.dna.grouping import (
    SegmentGrouper, interval_overlap_ratio, overlap_length, overlap_ratio,
)

pytestmark = pytest.mark.unit


def test_overlap_helpers(make_record):
    a = make_record("A", 10, 50)
    b = make_record("B", 20, 60)
    c = make_record("C", 50, 90)
    assert overlap_length(a, b) == 30
    assert overlap_ratio(a, b) == 0.75
    assert overlap_length(a, c) == 0
    assert overlap_ratio(a, c) == 0.0


def test_interval_overlap_ratio_accepts_numpy_scalars():
    assert interval_overlap_ratio(10, 50, 20, 60) == 0.75
    assert interval_overlap_ratio(10, 50, 50, 90) == 0.0
    assert interval_overlap_ratio(10, 50, 60, 90) == 0.0
    ratio = interval_overlap_ratio(*np.array([10, 50, 20, 60], dtype=np.int64))
    assert type(ratio) is float
    assert ratio == 0.75


def test_sweep_and_overlap_ratio_share_helper(internal_config, make_record, monkeypatch):
    calls = []
    real = grouping.interval_overlap_ratio

    def spy(*args):
        calls.append(args)
        return real(*args)

    monkeypatch.setattr(grouping, "interval_overlap_ratio", spy)
    records = [make_record("A", 10, 50), make_record("B", 20, 60), make_record("C", 15, 55)]

    assert len(SegmentGrouper(internal_config).find_groups(records)) == 1
    assert calls
    sweep_calls = len(calls)
    assert overlap_ratio(records[0], records[1]) == 0.75
    assert len(calls) == sweep_calls + 1


def test_default_config(internal_config):
    grouper = SegmentGrouper(internal_config)
    assert grouper.overlap_threshold == 0.5
    assert grouper.minimum_matches == 3


def test_three_overlapping_segments_form_one_group(internal_config, make_record):
    a = make_record("A", 10, 50)
    b = make_record("B", 20, 60)
    c = make_record("C", 15, 55)
    d = make_record("D", 1000, 1100)

    groups = SegmentGrouper(internal_config).find_groups([a, b, c, d])

    assert len(groups) == 1
    group = groups[0]
    assert (group.start, group.end) == (20, 50)
    assert set(group.members) == {a, b, c}
    assert d not in group.members
    assert group.member_count == 3
    assert group.total_size_cm == pytest.approx(30.0)
    assert group.average_size_cm == pytest.approx(10.0)


def test_chromosomes_are_grouped_independently(internal_config, make_record):
    records = [
        make_record("A", 10, 50, chromosome=2),
        make_record("B", 20, 60, chromosome=2),
        make_record("C", 15, 55, chromosome=1),
        make_record("D", 15, 55, chromosome=1),
        make_record("E", 12, 52, chromosome=2),
    ]
    groups = SegmentGrouper(internal_config).find_groups(records)

    assert [g.chromosome for g in groups] == [2]
    assert all(m.chromosome == 2 for m in groups[0].members)


def test_too_few_members_yields_nothing(internal_config, make_record):
    records = [make_record("A", 10, 50), make_record("B", 20, 60)]
    assert SegmentGrouper(internal_config).find_groups(records) == []


def test_low_overlap_is_not_accepted(internal_config, make_record):
    records = [
        make_record("A", 0, 100),
        make_record("B", 60, 200),
        make_record("C", 70, 210),
    ]
    groups = SegmentGrouper(internal_config).find_groups(records)
    # A overlaps B and C by 40% and 30% of the shorter span; B and C then pair
    # with each other but only two remain.
    assert groups == []


def test_empty_intersection_drops_group_and_frees_members(make_config, make_record):
    config = make_config(minimum_matches=3, overlap_threshold=0.1)
    # Seed [0,100] accepts [10,110] and [90,300]; their intersection [90,100]
    # is positive, so this checks the positive case first.
    ok = SegmentGrouper(config).find_groups([
        make_record("A", 0, 100),
        make_record("B", 10, 110),
        make_record("C", 90, 300),
    ])
    assert len(ok) == 1
    assert (ok[0].start, ok[0].end) == (90, 100)

    # Seed [0,1000] accepts [0,100] and [500,1000], which do not overlap.
    dropped = SegmentGrouper(config).find_groups([
        make_record("A", 0, 1000),
        make_record("B", 0, 100),
        make_record("C", 500, 1000),
    ])
    assert dropped == []


def test_each_segment_in_at_most_one_group(make_config, make_record):
    config = make_config(minimum_matches=2)
    records = [
        make_record(f"M{i}", start, start + 100, chromosome=chrom)
        for i, (start, chrom) in enumerate([
            (0, 1), (10, 1), (20, 1), (30, 1), (40, 1), (150, 1), (160, 1),
            (0, 5), (50, 5), (60, 5), (500, 5),
        ])
    ]
    groups = SegmentGrouper(config).find_groups(records)

    seen = set()
    for group in groups:
        for member in group.members:
            key = (member.source_file, member.row_index, member.chromosome)
            assert key not in seen
            seen.add(key)
    assert groups


def test_group_ids_are_stable(internal_config, make_record):
    records = [
        make_record("A", 10, 50, row_index=0),
        make_record("B", 20, 60, row_index=1),
        make_record("C", 15, 55, row_index=2),
    ]
    first = SegmentGrouper(internal_config).find_groups(records)
    second = SegmentGrouper(internal_config).find_groups(list(reversed(records)))
    assert first[0].group_id == second[0].group_id
    assert len(first[0].group_id) == 12


def test_mixed_chromosomes_rejected(internal_config, make_record):
    grouper = SegmentGrouper(internal_config)
    with pytest.raises(ValueError, match="one chromosome"):
        grouper.group_chromosome([
            make_record("A", 1, 10, chromosome=1),
            make_record("B", 1, 10, chromosome=2),
            make_record("C", 1, 10, chromosome=3),
        ])
