"""ParamConfig: Expert defaults for the dnatri pipeline.

This module defines the complete default configuration. ALL pipeline
parameters must have defaults here. No runtime code should define fallback
values - this is the single source of truth for defaults.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal
from pydantic import Field, field_validator, model_validator
from dnatri.schemas.base import DnatriBaseModel


# =============================================================================
# Nested Configuration Models
# =============================================================================

class ThresholdsConfig(DnatriBaseModel):
    """Segment and group acceptance thresholds."""
    minimum_size_cm: float = Field(7.0, ge=0, description="Minimum segment size in cM")
    minimum_matches: int = Field(3, ge=2, description="Minimum people per group")
    overlap_threshold: float = Field(0.5, gt=0, le=1.0, description="Overlap fraction against the seed")

    @field_validator("minimum_size_cm", "overlap_threshold", mode="before")
    @classmethod
    def coerce_to_float(cls, v):
        """Allow int or float."""
        return float(v)


class FeaturesConfig(DnatriBaseModel):
    """Optional pipeline stages."""
    enable_confidence_scoring: bool = True
    enable_relationship_prediction: bool = False
    enable_cross_verification: bool = False


class ScoringWeightsConfig(DnatriBaseModel):
    """Weights of the four confidence factors."""
    size: float = Field(0.3, ge=0, le=1)
    overlap: float = Field(0.2, ge=0, le=1)
    match_count: float = Field(0.3, ge=0, le=1)
    total_cm: float = Field(0.2, ge=0, le=1)

    @model_validator(mode="after")
    def weights_sum_to_one(self):
        total = self.size + self.overlap + self.match_count + self.total_cm
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Scoring weights must sum to 1.0, got {total:.3f}")
        return self


class ScoringConfig(DnatriBaseModel):
    """Confidence score normalization.

    Each factor saturates at its ``*_full`` value.
    """
    size_cm_full: float = Field(20.0, gt=0, description="Average segment size earning full size score")
    match_count_full: int = Field(10, ge=1, description="Member count earning full match score")
    total_cm_full: float = Field(1000.0, gt=0, description="Total cM earning full total score")
    weights: ScoringWeightsConfig = Field(default_factory=ScoringWeightsConfig)


class NamesConfig(DnatriBaseModel):
    """Name canonicalization settings."""
    titles: list[str] = Field(default_factory=lambda: ["mr", "mrs", "ms", "dr", "prof"])
    suffixes: list[str] = Field(default_factory=lambda: ["jr", "sr", "ii", "iii", "iv"])
    placeholder_prefix: str = "Unknown Match"

    @field_validator("titles", "suffixes", mode="before")
    @classmethod
    def normalize_tokens(cls, v):
        """Store tokens lowercase without trailing dots."""
        if isinstance(v, (list, tuple)):
            return [str(t).strip().lower().rstrip(".") for t in v if str(t).strip()]
        return v


def _default_column_aliases() -> dict[str, list[str]]:
    return {
        "match_name": ["Match Name", "Full Name", "Name", "Display Name", "Match Names", "Matches"],
        "chromosome": ["Chromosome", "CHR"],
        "start": ["Start Location", "Start Position", "start_position", "Start"],
        "end": ["End Location", "End Position", "end_position", "End"],
        "size_cm": ["Overlap cM", "Shared DNA", "Size (cM)", "cM", "Centimorgans"],
        "snps": ["Matching SNPs", "SNPs", "Markers Tested"],
        "y_haplogroup": ["Y-DNA Haplogroup", "Y Haplogroup", "Paternal Haplogroup"],
        "mt_haplogroup": ["mtDNA Haplogroup", "mt Haplogroup", "Maternal Haplogroup"],
        "surnames": ["Ancestral Surnames", "Surnames", "Family Names"],
        "locations": ["Locations", "Location", "Ancestral Locations"],
        "notes": ["Notes", "Note", "Comments"],
    }


class LoaderConfig(DnatriBaseModel):
    """Tabular source reading.

    Header names are matched exactly (case-insensitive) against the alias
    lists; no fuzzy header detection is attempted.
    """
    column_aliases: dict[str, list[str]] = Field(default_factory=_default_column_aliases)
    encoding: str = "utf-8"


class OutputConfig(DnatriBaseModel):
    """Export file configuration."""
    export_filename: str = "triangulation_results.csv"
    na_rep: str = "N/A"


class LoggingConfig(DnatriBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(DnatriBaseModel):
    """Complete expert configuration with all defaults.

    This is the single source of truth for all pipeline parameters.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    base_dir: str = "./dnatri_output"
    thresholds: ThresholdsConfig = Field(default_factory=ThresholdsConfig)
    features: FeaturesConfig = Field(default_factory=FeaturesConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    names: NamesConfig = Field(default_factory=NamesConfig)
    loader: LoaderConfig = Field(default_factory=LoaderConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
