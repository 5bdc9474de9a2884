from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator

from ..recommendations.models import Annotation

SCHEMA_VERSION = 2


class PlaceAnalysis(BaseModel):
    """One verdict as returned by the model (version 2)."""

    name: str = Field(min_length=1)
    place_id: str | None = Field(default=None, validation_alias=AliasChoices("place_id", "id"))
    is_relevant: bool = True
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    match_reason: str = Field(
        default="", validation_alias=AliasChoices("match_reason", "why_love")
    )
    famous_dishes: list[str] = Field(default_factory=list)
    tip: str | None = Field(default=None, validation_alias=AliasChoices("tip", "Tip", "secret_tip"))
    note: str | None = None
    address: str | None = None
    rating: float | None = None
    phone: str | None = None
    website: str | None = None
    link: str | None = None
    categories: list[str] | None = None

    @field_validator("famous_dishes", mode="before")
    @classmethod
    def _dishes_as_list(cls, value: object) -> object:
        if not isinstance(value, list):
            return []
        return [dish for dish in value if isinstance(dish, str)]

    def to_annotation(self) -> Annotation:
        return Annotation(**self.model_dump(exclude={"confidence"}))


class AnalysisPayload(BaseModel):
    """
    Full judge reply.

    Version 1 replies used a top-level ``recommendations`` array; they are
    read into ``place_analysis`` unchanged.
    """

    schema_version: Literal[1, 2] = SCHEMA_VERSION
    place_analysis: list[PlaceAnalysis] = Field(
        validation_alias=AliasChoices("place_analysis", "recommendations")
    )
