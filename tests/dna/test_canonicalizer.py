"""Test identity canonicalization and deduplication."""

import itertools

import pytest

from dnatri.dna.canonicalizer import (
    IdentityCanonicalizer,
    canonicalize_name,
    is_unusable_name,
)
from dnatri.errors import DataQualityError, NameQualityWarning

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("raw,expected", [
    ("John Doe", "john doe"),
    ("  JOHN   doe ", "john doe"),
    ("Doe, John", "john doe"),
    ("Dr. John Doe Jr.", "john doe"),
    ("Mrs Jane Smith III", "jane smith"),
    ("a, b, c", "a b c"),
    ("", ""),
])
def test_canonicalize_name(raw, expected):
    assert canonicalize_name(raw) == expected


@pytest.mark.parametrize("raw", [
    "Doe, John", "Dr. John Doe Jr.", "a, b, c", " , x", "Smith,", "Prof. Mr. X", "12345",
])
def test_canonicalize_name_is_idempotent(raw):
    once = canonicalize_name(raw)
    assert canonicalize_name(once) == once


def test_unusable_names():
    assert is_unusable_name("")
    assert is_unusable_name("x")
    assert is_unusable_name("12 345")
    assert not is_unusable_name("jo")


def test_variants_merge_into_one_profile(internal_config, make_record):
    records = [
        make_record("John Doe", source_file="ftdna.csv"),
        make_record("Doe, John", source_file="myheritage.csv", start=200, end=300),
        make_record("Dr. John Doe", source_file="gedmatch.csv", start=400, end=500),
        make_record("Jane Roe", source_file="ftdna.csv"),
    ]
    result = IdentityCanonicalizer(internal_config).canonicalize(records)

    assert result.profile_count == 2
    assert len(result.records) == 4
    profile = result.profiles["john doe"]
    assert profile.display_name == "John Doe"
    assert profile.segment_count == 3
    assert profile.source_files == {"ftdna.csv", "myheritage.csv", "gedmatch.csv"}
    assert profile.variations == {"John Doe", "Doe, John", "Dr. John Doe"}
    assert [r.display_name for r in result.records[:3]] == ["John Doe"] * 3


def test_first_seen_name_wins(internal_config, make_record):
    records = [make_record("doe, john"), make_record("John Doe")]
    result = IdentityCanonicalizer(internal_config).canonicalize(records)
    assert result.records[1].display_name == "doe, john"


def test_first_non_empty_haplogroup_is_kept(internal_config, make_record):
    records = [
        make_record("John Doe"),
        make_record("John Doe", y_haplogroup="R-M269"),
        make_record("John Doe", y_haplogroup="I-M253", mt_haplogroup="H1"),
    ]
    result = IdentityCanonicalizer(internal_config).canonicalize(records)
    assert {r.y_haplogroup for r in result.records} == {"R-M269"}
    assert {r.mt_haplogroup for r in result.records} == {"H1"}


def test_set_fields_merge_independent_of_order(internal_config, make_record):
    records = [
        make_record("John Doe", surnames=frozenset({"Doe"}), locations=frozenset({"Ohio"})),
        make_record("Doe, John", surnames=frozenset({"Smith"})),
        make_record("JOHN DOE", surnames=frozenset({"Doe", "Brown"}), locations=frozenset({"Kent"})),
    ]
    canonicalizer = IdentityCanonicalizer(internal_config)

    outcomes = set()
    for perm in itertools.permutations(records):
        profile = canonicalizer.canonicalize(list(perm)).profiles["john doe"]
        outcomes.add((frozenset(profile.surnames), frozenset(profile.locations)))

    assert outcomes == {(frozenset({"Doe", "Smith", "Brown"}), frozenset({"Ohio", "Kent"}))}


def test_unusable_names_get_unique_placeholders(internal_config, make_record):
    records = [
        make_record("12345", source_file="a.csv", row_index=3),
        make_record("", source_file="a.csv", row_index=4),
    ]
    result = IdentityCanonicalizer(internal_config).canonicalize(records)

    assert result.profile_count == 2
    assert result.records[0].display_name == "Unknown Match (a.csv row 3)"
    assert result.records[1].display_name == "Unknown Match (a.csv row 4)"
    assert len(result.warnings) == 2
    assert all(isinstance(w, NameQualityWarning) for w in result.warnings)
    assert result.warnings[0].raw_name == "12345"


def test_empty_input_raises(internal_config):
    with pytest.raises(DataQualityError, match="size >= 7 cM"):
        IdentityCanonicalizer(internal_config).canonicalize([])


def test_empty_input_reports_configured_minimum(make_config):
    config = make_config(thresholds={"minimum_size_cm": 12.5})
    with pytest.raises(DataQualityError) as info:
        IdentityCanonicalizer(config).canonicalize([])
    assert info.value.minimum_size_cm == 12.5
    assert "size >= 12.5 cM" in str(info.value)


def test_configured_titles_are_dropped(make_config, make_record):
    config = make_config(names={"titles": ["Rev."]})
    canonicalizer = IdentityCanonicalizer(config)
    assert canonicalizer.canonical_key("Rev. John Doe") == "john doe"
    assert canonicalizer.canonical_key("Dr. John Doe") == "dr. john doe"
