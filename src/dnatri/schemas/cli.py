"""CLIConfig: Command-line operational overrides.

Minimal configuration for operational parameters that commonly change
between runs: output directory, pedigree file, verbosity.

This schema handles command-line arguments parsed by argparse.
"""

from typing import Literal, Optional
from pydantic import model_validator
from dnatri.schemas.base import DnatriBaseModel


class CLIConfig(DnatriBaseModel):
    """Command-line configuration overrides.

    Operational-only settings that override user and param configs.
    Highest priority in config resolution.

    Notes
    -----
    If a tree_path is provided but cross_verify is not, cross verification is
    switched on (schema responsibility, not runtime).

    Usage
    -----
        cli_cfg = CLIConfig(
            base_dir="/scratch/dnatri_output",
            tree_path="family.json",
        )
        # cross_verify automatically set to True

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    base_dir: Optional[str] = None
    tree_path: Optional[str] = None
    cross_verify: Optional[bool] = None
    predict_relationships: Optional[bool] = None
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None

    @model_validator(mode="after")
    def infer_cross_verify_from_tree(self):
        """A pedigree file on the command line implies cross verification."""
        if self.cross_verify is None and self.tree_path:
            self.cross_verify = True
        return self

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.base_dir is not None:
            overrides["base_dir"] = str(self.base_dir)

        if self.tree_path is not None:
            overrides["tree_path"] = str(self.tree_path)

        features = {}
        if self.cross_verify is not None:
            features["enable_cross_verification"] = self.cross_verify
        if self.predict_relationships is not None:
            features["enable_relationship_prediction"] = self.predict_relationships
        if features:
            overrides["features"] = features

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
