from __future__ import annotations

import json
import logging

from ..errors import ProviderError
from ..llm.providers import Provider, ProviderStrategy, Tier, escalate
from ..recommendations.models import Annotation, EnrichedCandidate
from .heuristics import heuristic_annotations
from .schemas import SCHEMA_VERSION, AnalysisPayload

logger = logging.getLogger(__name__)

PROMPT_TEXT_CHARS = 4000
NO_REVIEWS_TEXT = "No reviews available."

# ---------------------------------------------------------------------------
# LLM Prompts
# ---------------------------------------------------------------------------

ANALYSIS_PROMPT = f"""\
You are a friendly foodie guide who vets places for a user's mood or craving.
For EVERY place in the input give one verdict. Do not rank, merge or drop places.

Rules:
- match_reason: positives only (taste, signature dishes, ambience, service), one or two sentences.
- note: only explicit complaints found in the text (slow service, stale food, \
overpriced, hygiene). Omit when there are none.
- famous_dishes: concrete dish names found in the text ("butter chicken", \
"filter coffee"), at most 5. Never vague praise like "food is awesome". \
Empty list when none are named.
- tip: one practical tip for the visit, or null.
- is_relevant: false when the place clearly does not fit the user's request.
- id: copy the place's id exactly.

Return ONLY valid JSON:
{{
  "schema_version": {SCHEMA_VERSION},
  "place_analysis": [
    {{
      "id": "place id from input",
      "name": "Exact place name",
      "is_relevant": true,
      "confidence": 0.8,
      "match_reason": "...",
      "famous_dishes": ["Dish 1", "Dish 2"],
      "tip": "...",
      "note": null
    }}
  ]
}}"""

FALLBACK_QUERY_PROMPT = """\
A food search returned no results. Suggest ONE broader search for the same \
craving in the same place.
- Broaden to the category: "Fruit Ice Cream" -> "Ice Cream Shop", "Sushi" -> "Asian Food".
- For a vibe ("rooftop jazz bar") use "Best Rated Restaurants".
- The location text MUST appear in your answer exactly as given.
Return ONLY the search string. No JSON, no quotes."""


def _build_user_message(candidates: list[EnrichedCandidate], mood: str) -> str:
    places = [
        {
            "id": c.unique_id,
            "name": c.title,
            "rating": c.rating,
            "categories": c.categories,
            "text": c.scraped_content[:PROMPT_TEXT_CHARS] if c.scraped_content else NO_REVIEWS_TEXT,
        }
        for c in candidates
    ]
    return f"USER QUERY: {json.dumps(mood)}\n\nPLACES:\n{json.dumps(places, ensure_ascii=False)}"


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


def _analyze_with_provider(
    provider: Provider,
    candidates: list[EnrichedCandidate],
    mood: str,
) -> list[Annotation]:
    parsed = provider.complete_json(ANALYSIS_PROMPT, _build_user_message(candidates, mood))
    payload = AnalysisPayload.model_validate(parsed)
    if not payload.place_analysis:
        raise ProviderError(f"{provider.name} returned no verdicts")
    return [item.to_annotation() for item in payload.place_analysis]


def analyze_places(
    candidates: list[EnrichedCandidate],
    mood: str,
    strategy: ProviderStrategy,
) -> list[Annotation]:
    """
    Judge each enriched candidate against the user's mood.

    Tries the active model providers in order and ends with a heuristic
    verdict per candidate, so a non-empty input always gets annotations.
    """
    if not candidates:
        return []

    tiers: list[Tier[list[Annotation]]] = strategy.provider_tiers(_analyze_with_provider)
    tiers.append(Tier("heuristic", heuristic_annotations))
    return escalate(tiers, candidates, mood, on_failure=strategy.record_failure)


# ---------------------------------------------------------------------------
# Fallback query
# ---------------------------------------------------------------------------


def default_fallback_query(original_query: str, location: str) -> str:
    return f"Restaurants in {location}" if location else "Restaurants"


def _ensure_location(query: str, location: str) -> str:
    if location and location.lower() not in query.lower():
        return f"{query} in {location}"
    return query


def _fallback_with_provider(provider: Provider, original_query: str, location: str) -> str:
    user_content = f"ORIGINAL SEARCH: {json.dumps(original_query)}\nLOCATION: {json.dumps(location)}"
    text = provider.complete_text(FALLBACK_QUERY_PROMPT, user_content)
    first_line = next((line for line in text.splitlines() if line.strip()), "")
    query = first_line.strip().strip("\"'`").strip()
    if not query:
        raise ProviderError(f"{provider.name} returned an empty fallback query")
    return _ensure_location(query, location)


def get_fallback_query(original_query: str, location: str, strategy: ProviderStrategy) -> str:
    """Broaden a search that found nothing; the result always names the location."""
    tiers: list[Tier[str]] = strategy.provider_tiers(_fallback_with_provider)
    tiers.append(Tier("default", default_fallback_query))
    return escalate(tiers, original_query, location, on_failure=strategy.record_failure)
