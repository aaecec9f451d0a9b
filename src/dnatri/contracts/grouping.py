"""Grouping stage contract.

Enforces that groups have a positive intersection span, enough members, and
that no segment belongs to two groups on the same chromosome.
"""

from typing import Sequence

from dnatri.contracts.base import require


def assert_grouped(groups: Sequence, minimum_matches: int, partitioned: bool = True) -> None:
    """Enforce grouping stage contract.

    Parameters
    ----------
    groups : sequence of TriangulationGroup
        Output of the grouping engine or the ancestor splitter.

    minimum_matches : int
        Configured minimum group size.

    partitioned : bool, optional
        Check that each segment appears in at most one group per chromosome.
        Ancestor splitting may legitimately place one segment in several
        ancestor-specific groups, so the orchestrator disables this check
        after a split.

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    seen = set()
    for group in groups:
        require(
            1 <= group.chromosome <= 23,
            f"Grouping contract violated: chromosome {group.chromosome} out of range"
        )
        require(
            group.start < group.end,
            f"Grouping contract violated: group {group.group_id} span "
            f"{group.start}-{group.end} is not positive"
        )
        require(
            group.member_count >= minimum_matches,
            f"Grouping contract violated: group {group.group_id} has "
            f"{group.member_count} members, expected >= {minimum_matches}"
        )
        for member in group.members:
            require(
                member.chromosome == group.chromosome,
                f"Grouping contract violated: member on chromosome {member.chromosome} "
                f"in group on chromosome {group.chromosome}"
            )
            require(
                member.start <= group.start and member.end >= group.end,
                f"Grouping contract violated: group {group.group_id} span is not "
                f"contained in member {member.display_name!r}"
            )
            if partitioned:
                key = (member.source_file, member.row_index, member.chromosome)
                require(
                    key not in seen,
                    f"Grouping contract violated: segment {member.source_file} row "
                    f"{member.row_index} appears in more than one group"
                )
                seen.add(key)
