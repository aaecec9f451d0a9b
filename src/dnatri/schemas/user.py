"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs in a variety of formats, with aliases for
common naming patterns (e.g., MIN_SIZE_CM -> minimum_size_cm).

UserConfig is intentionally minimal - users only specify what they want to
override from the expert defaults. Validation is lenient: uppercase keys,
integers where floats are expected, and overlap thresholds written as
percentages are all accepted.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from dnatri.schemas.base import DnatriBaseModel


def _fraction(v):
    """Accept 0.5 or 50 for a 50% overlap threshold."""
    if v is None:
        return v
    v = float(v)
    if v > 1.0:
        v = v / 100.0
    return v


class UserThresholdsConfig(DnatriBaseModel):
    """User-facing thresholds."""
    minimum_size_cm: Optional[float] = None
    minimum_matches: Optional[int] = None
    overlap_threshold: Optional[float] = None

    @field_validator("overlap_threshold", mode="before")
    @classmethod
    def coerce_overlap(cls, v):
        return _fraction(v)


class UserFeaturesConfig(DnatriBaseModel):
    """User-facing stage toggles."""
    enable_confidence_scoring: Optional[bool] = None
    enable_relationship_prediction: Optional[bool] = None
    enable_cross_verification: Optional[bool] = None


class UserNamesConfig(DnatriBaseModel):
    """User-facing name settings."""
    titles: Optional[list[str]] = None
    suffixes: Optional[list[str]] = None

    @field_validator("titles", "suffixes", mode="before")
    @classmethod
    def normalize_tokens(cls, v):
        if isinstance(v, (list, tuple)):
            return [str(t).strip().lower().rstrip(".") for t in v if str(t).strip()]
        return v


class UserLoaderConfig(DnatriBaseModel):
    """User-facing loader settings.

    ``column_aliases`` entries are added to (not replacing) the defaults.
    """
    column_aliases: Optional[dict[str, list[str]]] = None
    encoding: Optional[str] = None


class UserConfig(DnatriBaseModel):
    """User-facing configuration schema.

    Minimal, forgiving, and uses common aliases. Users only specify what they
    want to override from ParamConfig defaults.

    Usage
    -----
        user_cfg = UserConfig(
            MIN_SIZE_CM=10,
            MIN_MATCHES=3,
            OVERLAP_THRESHOLD=60,
            PREDICT_RELATIONSHIPS=True,
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    base_dir: Optional[str] = Field(None, alias="BASE_DIR")

    # Threshold settings (flat aliases)
    minimum_size_cm: Optional[float] = Field(None, alias="MIN_SIZE_CM")
    minimum_matches: Optional[int] = Field(None, alias="MIN_MATCHES")
    overlap_threshold: Optional[float] = Field(None, alias="OVERLAP_THRESHOLD")

    # Feature toggles (flat aliases)
    score_confidence: Optional[bool] = Field(None, alias="SCORE_CONFIDENCE")
    predict_relationships: Optional[bool] = Field(None, alias="PREDICT_RELATIONSHIPS")
    cross_verify: Optional[bool] = Field(None, alias="CROSS_VERIFY")

    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = Field(
        None, alias="LOG_LEVEL"
    )

    # Nested overrides (advanced users)
    thresholds: Optional[UserThresholdsConfig] = None
    features: Optional[UserFeaturesConfig] = None
    names: Optional[UserNamesConfig] = None
    loader: Optional[UserLoaderConfig] = None

    model_config = DnatriBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("overlap_threshold", mode="before")
    @classmethod
    def coerce_overlap(cls, v):
        """Accept fractions or percentages."""
        return _fraction(v)

    @field_validator("minimum_size_cm", mode="before")
    @classmethod
    def coerce_numeric_fields(cls, v):
        """Accept int or float."""
        if v is not None:
            return float(v)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.base_dir is not None:
            overrides["base_dir"] = str(self.base_dir)

        # Thresholds section
        thresholds = {}
        if self.minimum_size_cm is not None:
            thresholds["minimum_size_cm"] = self.minimum_size_cm
        if self.minimum_matches is not None:
            thresholds["minimum_matches"] = self.minimum_matches
        if self.overlap_threshold is not None:
            thresholds["overlap_threshold"] = self.overlap_threshold
        if self.thresholds is not None:
            thresholds.update(self.thresholds.model_dump(exclude_none=True))
        if thresholds:
            overrides["thresholds"] = thresholds

        # Features section
        features = {}
        if self.score_confidence is not None:
            features["enable_confidence_scoring"] = self.score_confidence
        if self.predict_relationships is not None:
            features["enable_relationship_prediction"] = self.predict_relationships
        if self.cross_verify is not None:
            features["enable_cross_verification"] = self.cross_verify
        if self.features is not None:
            features.update(self.features.model_dump(exclude_none=True))
        if features:
            overrides["features"] = features

        if self.names is not None:
            names = self.names.model_dump(exclude_none=True)
            if names:
                overrides["names"] = names

        if self.loader is not None:
            loader = self.loader.model_dump(exclude_none=True)
            if loader:
                overrides["loader"] = loader

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
