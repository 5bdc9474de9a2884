from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_DISHES = 5
MAX_DISH_LENGTH = 80
BANNED_DISH_PHRASES = ("awesome", "great", "nice", "good food")

_ALPHA_RE = re.compile(r"[A-Za-z]")


def clean_dishes(dishes: object) -> list[str]:
    """Keep concrete dish names; drop generic praise and junk."""
    if not isinstance(dishes, list):
        return []

    cleaned: list[str] = []
    seen: set[str] = set()
    for dish in dishes:
        if not isinstance(dish, str):
            continue
        dish = dish.strip()
        lower = dish.lower()
        if not dish or len(dish) > MAX_DISH_LENGTH or not _ALPHA_RE.search(dish):
            continue
        if any(phrase in lower for phrase in BANNED_DISH_PHRASES):
            continue
        if lower in seen:
            continue
        seen.add(lower)
        cleaned.append(dish)
        if len(cleaned) == MAX_DISHES:
            break
    return cleaned


# ── Inbound ─────────────────────────────────────────────────────────────


class AgentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    query: str = Field(..., min_length=1, max_length=1000)
    user_location: str = Field(default="India", alias="userLocation")

    @field_validator("user_location", mode="before")
    @classmethod
    def _default_location(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return "India"
        return value


# ── Pipeline records ────────────────────────────────────────────────────


class PlaceCandidate(BaseModel):
    title: str
    address: str = "Address not available"
    rating: float | None = None
    rating_count: int | None = None
    link: str = ""
    website: str = ""
    phone: str = ""
    categories: list[str] = Field(default_factory=list)
    cid: str | None = None
    place_id: str | None = None
    unique_id: str


class EnrichedCandidate(PlaceCandidate):
    scraped_content: str = ""


class Annotation(BaseModel):
    name: str = ""
    place_id: str | None = None
    is_relevant: bool = True
    match_reason: str = ""
    famous_dishes: list[str] = Field(default_factory=list)
    tip: str | None = None
    note: str | None = None
    # Factual echoes, used only to backfill empty provider fields
    address: str | None = None
    rating: float | None = None
    phone: str | None = None
    website: str | None = None
    link: str | None = None
    categories: list[str] | None = None

    @field_validator("famous_dishes", mode="before")
    @classmethod
    def _clean_dishes(cls, value: object) -> list[str]:
        return clean_dishes(value)


# ── Outbound ────────────────────────────────────────────────────────────


class RecommendationResult(BaseModel):
    name: str
    unique_id: str
    address: str
    rating: float | None = None
    rating_count: int | None = None
    phone: str = ""
    website: str = ""
    link: str = ""
    categories: list[str] = Field(default_factory=list)
    is_relevant: bool = True
    match_reason: str = ""
    famous_dishes: list[str] = Field(default_factory=list)
    tip: str | None = None
    note: str | None = None


class ResponseContext(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    original_query: str | None = None
    location_used: str | None = None
    is_fallback: bool = Field(default=False, alias="isFallback")
    message: str | None = None
    was_corrected: bool = False
    corrected_term: str | None = None


class AgentResponse(BaseModel):
    status: Literal["success", "error"]
    data: list[RecommendationResult] = Field(default_factory=list)
    context: ResponseContext = Field(default_factory=ResponseContext)
    message: str | None = None
