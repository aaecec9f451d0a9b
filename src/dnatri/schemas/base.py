"""Base Pydantic model with strict defaults for dnatri schemas.

All config schemas (and the Annotation model) inherit from this base to ensure
consistent validation behavior.
"""

from pydantic import BaseModel, ConfigDict


class DnatriBaseModel(BaseModel):
    """Base model for all dnatri schemas.

    Enforces strict validation:
    - No extra fields allowed
    - Validates assignments after initialization
    - Strips whitespace from strings
    """

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
    )
