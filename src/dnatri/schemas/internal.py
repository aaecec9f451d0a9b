"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and contains no optional fields that processing code depends on.

All .get() calls, fallback defaults, and validation logic are FORBIDDEN in
runtime code - everything is explicit here.
"""

from typing import Literal
from pydantic import Field, ConfigDict, model_validator
from dnatri.schemas.base import DnatriBaseModel


# =============================================================================
# Nested Configuration Models (Runtime)
# =============================================================================

class InternalThresholdsConfig(DnatriBaseModel):
    """Runtime thresholds."""
    minimum_size_cm: float = Field(ge=0)
    minimum_matches: int = Field(ge=2)
    overlap_threshold: float = Field(gt=0, le=1.0)


class InternalFeaturesConfig(DnatriBaseModel):
    """Runtime stage toggles."""
    enable_confidence_scoring: bool
    enable_relationship_prediction: bool
    enable_cross_verification: bool


class InternalScoringWeightsConfig(DnatriBaseModel):
    """Runtime confidence weights."""
    size: float
    overlap: float
    match_count: float
    total_cm: float

    @model_validator(mode="after")
    def weights_sum_to_one(self):
        total = self.size + self.overlap + self.match_count + self.total_cm
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Scoring weights must sum to 1.0, got {total:.3f}")
        return self


class InternalScoringConfig(DnatriBaseModel):
    """Runtime confidence normalization."""
    size_cm_full: float = Field(gt=0)
    match_count_full: int = Field(ge=1)
    total_cm_full: float = Field(gt=0)
    weights: InternalScoringWeightsConfig


class InternalNamesConfig(DnatriBaseModel):
    """Runtime name canonicalization settings."""
    titles: list[str]
    suffixes: list[str]
    placeholder_prefix: str


class InternalLoaderConfig(DnatriBaseModel):
    """Runtime source reading settings."""
    column_aliases: dict[str, list[str]]
    encoding: str


class InternalOutputConfig(DnatriBaseModel):
    """Runtime export settings."""
    export_filename: str
    na_rep: str


class InternalLoggingConfig(DnatriBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


# =============================================================================
# Main InternalConfig
# =============================================================================

class InternalConfig(DnatriBaseModel):
    """Authoritative runtime configuration.

    This is the ONLY configuration schema that processing code sees.
    It is fully validated, immutable, and contains explicit values for
    all parameters.

    Usage
    -----
    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.overlap_threshold = config.thresholds.overlap_threshold  # NOT .get()

    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO validation in runtime code
    """

    base_dir: str
    tree_path: str | None = None
    thresholds: InternalThresholdsConfig
    features: InternalFeaturesConfig
    scoring: InternalScoringConfig
    names: InternalNamesConfig
    loader: InternalLoaderConfig
    output: InternalOutputConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        frozen=True,
        str_strip_whitespace=True,
    )
