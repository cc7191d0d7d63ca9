"""Base Pydantic model configuration for fusion models.

All models inherit from FusionBaseModel:
- Immutability (frozen=True), messages never change once built
- Strict validation (extra="forbid") to catch typos and invalid fields
"""

from pydantic import BaseModel, ConfigDict


class FusionBaseModel(BaseModel):
    """Base model for all fusion entities."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        validate_default=True,
    )
