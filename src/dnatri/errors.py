"""User-facing errors raised by the triangulation pipeline.

These describe bad or missing input and are meant to be shown to the person
who supplied the files. Pipeline bugs are reported separately through
``dnatri.contracts.ContractViolation``.

Key distinction:
- TriangulationError subclasses: fix your input and retry
- NameQualityWarning: recorded and counted, never raised by the pipeline
- ContractViolation: a stage broke its own guarantees (programmer error)
"""

from typing import Iterable, Optional

__all__ = [
    'TriangulationError',
    'InputError',
    'SchemaError',
    'SourceIOError',
    'DataQualityError',
    'NameQualityWarning',
]


class TriangulationError(Exception):
    """Base class for fatal input errors."""
    pass


class InputError(TriangulationError):
    """No sources were supplied to the run."""

    def __init__(self, message: str = "No segment sources supplied. Provide at least one match file."):
        super().__init__(message)


class SchemaError(TriangulationError):
    """A source has no recognizable columns for the required fields."""

    def __init__(self, source: str, missing: Iterable[str]):
        self.source = source
        self.missing = tuple(missing)
        super().__init__(
            f"Error processing {source}: no recognizable columns for required fields "
            f"({', '.join(self.missing)}). Expected headers such as Chromosome, "
            f"Start Location, End Location and Overlap cM."
        )


class SourceIOError(TriangulationError):
    """A source could not be read."""

    def __init__(self, source: str, cause: Optional[BaseException] = None):
        self.source = source
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Error reading {source}{detail}")


class DataQualityError(TriangulationError):
    """Rows were read but none met the validation thresholds."""

    def __init__(self, minimum_size_cm: float, sources: Iterable[str] = ()):
        self.minimum_size_cm = minimum_size_cm
        self.sources = tuple(sources)
        super().__init__(
            "No valid DNA segment data found: no rows met thresholds "
            f"(chromosome 1-23, positive start < end, size >= {minimum_size_cm:g} cM)"
            + (f" in {', '.join(self.sources)}" if self.sources else "")
        )


class NameQualityWarning(UserWarning):
    """A match name was unusable and replaced by a placeholder.

    Instances are collected on the run result; they never abort a run.
    """

    def __init__(self, source_file: str, row_index: int, raw_name: str, placeholder: str):
        self.source_file = source_file
        self.row_index = row_index
        self.raw_name = raw_name
        self.placeholder = placeholder
        super().__init__(
            f"{source_file} row {row_index}: unusable match name {raw_name!r}, "
            f"using {placeholder!r}"
        )
