"""Segment records and merged identity profiles.

A ``SegmentRecord`` is one validated row from one source: a single shared
segment between the tester and one match. Records are immutable; the
canonicalizer produces rewritten copies carrying the merged metadata of the
``IdentityProfile`` they belong to.
"""

from dataclasses import dataclass, field, replace
from typing import Mapping, Optional

__all__ = ['SegmentRecord', 'IdentityProfile']


@dataclass(frozen=True)
class SegmentRecord:
    """One shared DNA segment reported by one source.

    Coordinates are half-open in spirit (``end - start`` is the span) and are
    validated before construction: ``1 <= chromosome <= 23`` and
    ``start < end``.

    ``extras`` holds columns the normalizer could not map. It is carried for
    export only and takes no part in equality or hashing.
    """

    raw_name: str
    display_name: str
    canonical_name: str
    chromosome: int
    start: int
    end: int
    size_cm: float
    source_file: str
    row_index: int
    snps: Optional[int] = None
    y_haplogroup: Optional[str] = None
    mt_haplogroup: Optional[str] = None
    surnames: frozenset = frozenset()
    locations: frozenset = frozenset()
    notes: frozenset = frozenset()
    extras: Mapping[str, str] = field(default_factory=dict, compare=False, hash=False)

    @property
    def span(self) -> int:
        return self.end - self.start

    def with_identity(self, profile: "IdentityProfile") -> "SegmentRecord":
        """Return a copy carrying the profile's display name and merged metadata."""
        return replace(
            self,
            display_name=profile.display_name,
            canonical_name=profile.canonical_name,
            y_haplogroup=profile.y_haplogroup,
            mt_haplogroup=profile.mt_haplogroup,
            surnames=frozenset(profile.surnames),
            locations=frozenset(profile.locations),
            notes=frozenset(profile.notes),
        )


@dataclass
class IdentityProfile:
    """Merged view of every record sharing one canonical name.

    Single-valued fields keep the first non-empty value seen; set-valued
    fields are unions, so the merged sets do not depend on input order.
    """

    canonical_name: str
    display_name: str
    variations: set = field(default_factory=set)
    surnames: set = field(default_factory=set)
    locations: set = field(default_factory=set)
    notes: set = field(default_factory=set)
    source_files: set = field(default_factory=set)
    y_haplogroup: Optional[str] = None
    mt_haplogroup: Optional[str] = None
    segment_count: int = 0

    @classmethod
    def from_record(cls, record: SegmentRecord) -> "IdentityProfile":
        profile = cls(canonical_name=record.canonical_name, display_name=record.display_name)
        profile.absorb(record)
        return profile

    def absorb(self, record: SegmentRecord) -> None:
        """Merge one record into this profile."""
        self.variations.add(record.raw_name)
        self.surnames.update(record.surnames)
        self.locations.update(record.locations)
        self.notes.update(record.notes)
        self.source_files.add(record.source_file)
        if not self.y_haplogroup and record.y_haplogroup:
            self.y_haplogroup = record.y_haplogroup
        if not self.mt_haplogroup and record.mt_haplogroup:
            self.mt_haplogroup = record.mt_haplogroup
        self.segment_count += 1
