from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class RefinedIntent(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_food: bool = True
    normalized_query: str
    location_string: str
    was_corrected: bool = False
    corrected_term: str | None = None


class RefinerOutput(BaseModel):
    """Shape of the classifier/refiner model reply."""

    is_food: bool = Field(validation_alias=AliasChoices("is_food", "isFood"))
    search_query: str = Field(
        default="", validation_alias=AliasChoices("search_query", "searchQuery")
    )
    location_string: str = Field(
        default="", validation_alias=AliasChoices("location_string", "locationString")
    )
    was_corrected: bool = Field(
        default=False, validation_alias=AliasChoices("was_corrected", "wasCorrected")
    )
    corrected_term: str | None = Field(
        default=None, validation_alias=AliasChoices("corrected_term", "correctedTerm")
    )
