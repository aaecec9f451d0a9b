"""Root-level pytest fixtures for the dnatri test suite.

Provides shared configuration fixtures following Pydantic-based architecture.
All tests must use these fixtures instead of creating raw dict configs.
"""

import pytest
from pathlib import Path
import tempfile
import shutil

from dnatri.core.records import SegmentRecord
from dnatri.schemas import ParamConfig, UserConfig, resolve_config


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults.

    Use this as the base for all test configs. Override specific values
    using make_config or by creating custom UserConfig instances.
    """
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides).

    Examples
    --------
    >>> def test_grouper_init(internal_config):
    ...     grouper = SegmentGrouper(internal_config)
    ...     assert grouper.minimum_matches == 3
    """
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_custom_threshold(make_config):
    ...     config = make_config(minimum_matches=2)
    ...     grouper = SegmentGrouper(config)
    ...     assert grouper.minimum_matches == 2
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        else:
            return resolve_config(param_config, None, None)

    return _make


# =============================================================================
# Record Fixtures
# =============================================================================

@pytest.fixture
def make_record():
    """Factory for validated SegmentRecords.

    Row indices auto-increment per test so records stay distinct.
    """
    counter = {"row": 0}

    def _make(name="Jane Doe", start=1, end=100, chromosome=1, size_cm=10.0,
              source_file="test.csv", **kwargs):
        row_index = kwargs.pop("row_index", counter["row"])
        counter["row"] += 1
        canonical = kwargs.pop("canonical_name", name.lower())
        return SegmentRecord(
            raw_name=name,
            display_name=name,
            canonical_name=canonical,
            chromosome=chromosome,
            start=start,
            end=end,
            size_cm=size_cm,
            source_file=source_file,
            row_index=row_index,
            **kwargs,
        )

    return _make


def segment_row(name, chromosome, start, end, size_cm, **extra):
    """A normalized source row (canonical field -> text)."""
    row = {
        "match_name": name,
        "chromosome": str(chromosome),
        "start": str(start),
        "end": str(end),
        "size_cm": str(size_cm),
    }
    row.update({k: str(v) for k, v in extra.items()})
    return row


@pytest.fixture
def make_row():
    return segment_row


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory that is cleaned up after test."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)
