from __future__ import annotations

import json
import logging
import re

from ..llm.providers import Provider, ProviderStrategy, Tier, escalate
from .models import RefinedIntent, RefinerOutput

logger = logging.getLogger(__name__)

REJECTION_MESSAGE = (
    "I can only help with food and drinks. "
    "Try a dish, a cuisine or a craving, like \"spicy noodles\" or \"cold coffee\"."
)

# ---------------------------------------------------------------------------
# LLM Prompts
# ---------------------------------------------------------------------------

REFINE_PROMPT = """\
You are the query interpreter for a food discovery app that searches Google Maps.
Given a user's mood or craving and their location, return ONLY valid JSON:
{
  "is_food": true,
  "search_query": "Pizza",
  "location_string": "Mau, Uttar Pradesh",
  "was_corrected": false,
  "corrected_term": null
}

Rules:
1. is_food is false when the request is not about something edible or drinkable \
(clothes, electronics, services, repairs, ...). Moods that imply eating \
("sad", "date night", "broke") ARE food.
2. Fix obvious misspellings and plurals ("Piza" -> "Pizza"). When you fix one, \
set was_corrected to true and corrected_term to the fixed word.
3. If the user asks for "local", "regional" or "famous" food, replace it with the \
cuisine or dish the location is known for (e.g. Mau -> "Litti Chokha"). If you \
do not know one, keep the request as is.
4. search_query must be 2-4 words of literal keywords. No filler ("vibes", \
"somewhere", "find me"), no negations, no location.
5. location_string is the USER LOCATION unless the input names another place \
explicitly ("Pizza in CP" -> "Connaught Place, Delhi")."""

# ---------------------------------------------------------------------------
# Query cleanup
# ---------------------------------------------------------------------------

_ARTIFACT_RE = re.compile(r"[|\"]")
_FILLER_RE = re.compile(
    r"\b(?:find me|show me|looking for|i want|i need|i am craving|i'm craving|"
    r"craving for|somewhere|some place|vibes?|please|can you)\b",
    re.IGNORECASE,
)
_NEGATION_RE = re.compile(r"\b(?:no|not|without|avoid|except)\s+[\w-]+", re.IGNORECASE)
_SPACES_RE = re.compile(r"\s+")

_VAGUE_LOCAL_RE = re.compile(r"\b(?:local|regional|famous)\b", re.IGNORECASE)
_VAGUE_SUBJECT_RE = re.compile(
    r"\b(?:food|cuisine|dish|dishes|speciality|specialty|eats)\b", re.IGNORECASE
)

REGIONAL_CUISINES: dict[str, str] = {
    "mau": "Litti Chokha",
    "varanasi": "Kachori Sabzi",
    "lucknow": "Awadhi Kebabs",
    "hyderabad": "Hyderabadi Biryani",
    "kolkata": "Bengali Thali",
    "delhi": "Chole Bhature",
    "mumbai": "Vada Pav",
    "chennai": "South Indian",
    "bengaluru": "South Indian",
    "bangalore": "South Indian",
    "amritsar": "Amritsari Kulcha",
    "indore": "Poha Jalebi",
    "jaipur": "Rajasthani Thali",
    "goa": "Goan Seafood",
    "kochi": "Kerala Meals",
    "patna": "Litti Chokha",
}


def clean_search_query(text: str) -> str:
    """Strip model artifacts, filler phrases and negated words from a query."""
    cleaned = _ARTIFACT_RE.sub(" ", text or "")
    cleaned = _NEGATION_RE.sub(" ", cleaned)
    cleaned = _FILLER_RE.sub(" ", cleaned)
    return _SPACES_RE.sub(" ", cleaned).strip(" ,.-")


def regional_cuisine(location: str) -> str | None:
    lower = (location or "").lower()
    for place, cuisine in REGIONAL_CUISINES.items():
        if re.search(rf"\b{re.escape(place)}\b", lower):
            return cuisine
    return None


def _is_vague_local(query: str) -> bool:
    return bool(_VAGUE_LOCAL_RE.search(query) and _VAGUE_SUBJECT_RE.search(query))


# ---------------------------------------------------------------------------
# Refinement tiers
# ---------------------------------------------------------------------------


def _default_intent(raw_query: str, location_hint: str) -> RefinedIntent:
    # Client-added context ("| Budget up to ...") never belongs in the search
    head = raw_query.split("|", 1)[0]
    query = clean_search_query(head) or head.strip() or raw_query.strip()

    cuisine = regional_cuisine(location_hint) if _is_vague_local(query) else None
    if cuisine:
        query = cuisine

    return RefinedIntent(
        is_food=True,
        normalized_query=query,
        location_string=location_hint,
    )


def _refine_with_provider(
    provider: Provider,
    raw_query: str,
    location_hint: str,
) -> RefinedIntent:
    user_content = f"USER INPUT: {json.dumps(raw_query)}\nUSER LOCATION: {json.dumps(location_hint)}"
    cuisine = regional_cuisine(location_hint)
    if cuisine:
        user_content += f"\nKnown local speciality of this location: {cuisine}"

    parsed = provider.complete_json(REFINE_PROMPT, user_content)
    output = RefinerOutput.model_validate(parsed)

    location = output.location_string.strip() or location_hint
    if not output.is_food:
        return RefinedIntent(is_food=False, normalized_query="", location_string=location)

    query = clean_search_query(output.search_query) or _default_intent(raw_query, location_hint).normalized_query
    corrected_term = None
    if output.was_corrected:
        corrected_term = (output.corrected_term or "").strip() or query

    return RefinedIntent(
        is_food=True,
        normalized_query=query,
        location_string=location,
        was_corrected=output.was_corrected,
        corrected_term=corrected_term,
    )


def refine_intent(
    raw_query: str,
    location_hint: str,
    strategy: ProviderStrategy,
) -> RefinedIntent:
    """
    Classify and normalise a free-text craving.

    Never raises: provider failures fall through to a default built from the
    inputs.
    """
    tiers: list[Tier[RefinedIntent]] = strategy.provider_tiers(_refine_with_provider)
    tiers.append(Tier("default", _default_intent))
    intent = escalate(tiers, raw_query, location_hint, on_failure=strategy.record_failure)
    logger.info(
        "Refined %r -> %r in %r (food=%s)",
        raw_query,
        intent.normalized_query,
        intent.location_string,
        intent.is_food,
    )
    return intent
