"""Base Pydantic model configuration for infrastructure models."""

from pydantic import BaseModel, ConfigDict


class InfrastructureModel(BaseModel):
    """Base model for infrastructure response models.

    Provides standard Pydantic configuration for:
    - Accepting both field names and wire aliases
    - Validation on assignment
    - Whitespace stripping of strings
    """

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        str_strip_whitespace=True,
    )
