"""Strict, immutable base model used by every value object of the engine."""

from pydantic import BaseModel, ConfigDict


class StrictBaseModel(BaseModel):
    """
    A strict, immutable pydantic base model.

    Instances are frozen once validated, unknown fields are rejected, and no
    implicit type coercion takes place.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        strict=True,
        arbitrary_types_allowed=True,
    )
