"""Scoring stage contract.

Enforces that confidence scores are integers in [0, 100].
"""

from typing import Sequence

from dnatri.contracts.base import require


def assert_scored(groups: Sequence) -> None:
    """Enforce scoring stage contract.

    Raises
    ------
    ContractViolation
        If a score is not an integer in [0, 100]
    """
    for group in groups:
        score = group.confidence_score
        require(
            isinstance(score, int) and not isinstance(score, bool),
            f"Scoring contract violated: group {group.group_id} score is {type(score)}, expected int"
        )
        require(
            0 <= score <= 100,
            f"Scoring contract violated: group {group.group_id} score {score} outside [0, 100]"
        )
