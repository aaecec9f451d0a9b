"""Pipeline contracts: fail-fast enforcement of stage invariants.

Contracts fail immediately and loudly when a pipeline stage does not produce
the invariants it promised. Bad user input is reported through
``dnatri.errors``; contracts are reserved for pipeline bugs.

Key principle:
- Pydantic validates config correctness
- Row validation skips bad input rows
- Contracts validate pipeline correctness
"""

from dnatri.contracts.failure import ContractViolation
from dnatri.contracts.base import require
from dnatri.contracts.records import assert_canonicalized
from dnatri.contracts.grouping import assert_grouped
from dnatri.contracts.scoring import assert_scored

__all__ = [
    "ContractViolation",
    "require",
    "assert_canonicalized",
    "assert_grouped",
    "assert_scored",
]
