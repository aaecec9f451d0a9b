"""Pydantic configuration schemas for the dnatri pipeline.

All configuration validation, coercion, and normalization happens at schema
validation time via Pydantic.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Expert defaults (complete)
UserConfig : class
    User-facing configuration (forgiving, minimal)
CLIConfig : class
    Command-line operational overrides
"""

from dnatri.schemas.resolve import resolve_config
from dnatri.schemas.internal import InternalConfig
from dnatri.schemas.param import ParamConfig
from dnatri.schemas.user import UserConfig
from dnatri.schemas.cli import CLIConfig

__all__ = [
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
    'CLIConfig',
]
