"""Canonicalization stage contract.

Enforces that deduplicated records keep valid coordinates and that every
record points at exactly one identity profile.
"""

from typing import Mapping, Sequence

from dnatri.contracts.base import require


def assert_canonicalized(records: Sequence, profiles: Mapping) -> None:
    """Enforce canonicalization stage contract.

    Parameters
    ----------
    records : sequence of SegmentRecord
        Output records of the canonicalizer.

    profiles : mapping
        Canonical name -> IdentityProfile.

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    for record in records:
        require(
            1 <= record.chromosome <= 23,
            f"Canonicalization contract violated: chromosome {record.chromosome} out of range"
        )
        require(
            record.start < record.end,
            f"Canonicalization contract violated: empty span {record.start}-{record.end} "
            f"for {record.display_name!r}"
        )
        require(
            record.canonical_name in profiles,
            f"Canonicalization contract violated: no profile for {record.canonical_name!r}"
        )
        require(
            record.display_name == profiles[record.canonical_name].display_name,
            f"Canonicalization contract violated: {record.display_name!r} does not carry "
            f"its profile display name"
        )

    total = sum(p.segment_count for p in profiles.values())
    require(
        total == len(records),
        f"Canonicalization contract violated: profiles own {total} segments, "
        f"expected {len(records)}"
    )
