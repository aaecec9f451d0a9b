"""Exception type for pipeline contract violations.

All violations raise the same exception type, so callers can tell pipeline
bugs apart from input errors uniformly.
"""


class ContractViolation(RuntimeError):
    """Raised when a pipeline contract is violated.

    This indicates a bug in pipeline logic, not bad user input. It means a
    stage did not produce the invariants it promised.

    Key distinction:
    - ValueError: config error (handled by Pydantic)
    - TriangulationError: unusable input files (dnatri.errors)
    - ContractViolation: pipeline bug (programmer error)
    """
    pass
