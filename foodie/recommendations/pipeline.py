from __future__ import annotations

import logging
import time

from ..enrichment.config import DEFAULT_ENRICHMENT_CONFIG, EnrichmentConfig
from ..enrichment.reviews import enrich_candidates, select_top_candidates
from ..intent.refiner import REJECTION_MESSAGE, refine_intent
from ..judge.analyzer import analyze_places, get_fallback_query
from ..llm.providers import ProviderStrategy
from ..search.config import DEFAULT_SERPER_CONFIG, SerperConfig
from ..search.places import search_places
from .filters import filter_candidates
from .models import AgentRequest, AgentResponse, ResponseContext
from .reconcile import reconcile

logger = logging.getLogger(__name__)

NO_PLACES_MESSAGE = "No places found."


def _broadened_message(fallback_query: str) -> str:
    return f'We couldn\'t find close matches nearby, so here are results for "{fallback_query}".'


def run_pipeline(
    request: AgentRequest,
    strategy: ProviderStrategy,
    serper_config: SerperConfig = DEFAULT_SERPER_CONFIG,
    enrichment_config: EnrichmentConfig = DEFAULT_ENRICHMENT_CONFIG,
) -> AgentResponse:
    """
    Turn a mood/craving into annotated nearby eateries.

    Raises ConfigurationError when the places provider is not configured;
    every other provider failure degrades to a default inside its stage.
    """
    start_time = time.time()
    query = request.query

    # --- Step 1: refine ---
    intent = refine_intent(query, request.user_location, strategy)
    if not intent.is_food:
        return AgentResponse(
            status="error",
            message=REJECTION_MESSAGE,
            context=ResponseContext(
                original_query=query,
                location_used=intent.location_string,
                message=REJECTION_MESSAGE,
            ),
        )

    # --- Step 2: search ---
    places = search_places(intent.normalized_query, intent.location_string, serper_config)

    # --- Step 3: filter, broadening once if nothing is left ---
    # A corrected spelling is a better subject than the raw text
    subject_text = intent.normalized_query if intent.was_corrected else query
    filtered = filter_candidates(places, intent, subject_text)
    fallback_query: str | None = None
    if filtered.needs_broadening:
        fallback_query = get_fallback_query(query, intent.location_string, strategy)
        logger.info("No results for %r, trying fallback query %r", intent.normalized_query, fallback_query)
        places = search_places(fallback_query, intent.location_string, serper_config, split=False)
        filtered = filter_candidates(places, intent, subject_text, enforce_location=False)

    context = ResponseContext(
        original_query=query,
        location_used=intent.location_string,
        was_corrected=intent.was_corrected,
        corrected_term=intent.corrected_term,
    )

    if not filtered.kept:
        context.message = NO_PLACES_MESSAGE
        return AgentResponse(status="success", data=[], context=context)

    # --- Step 4: enrich ---
    top = select_top_candidates(filtered.kept, enrichment_config.top_n)
    logger.info("Fetching public reviews for top %d candidates", len(top))
    enriched = enrich_candidates(top, enrichment_config)

    # --- Step 5: analyze ---
    annotations = analyze_places(enriched, query, strategy)

    # --- Step 6: reconcile ---
    results = reconcile(enriched, annotations)

    if filtered.fallback_message:
        context.is_fallback = True
        context.message = filtered.fallback_message
    elif fallback_query:
        context.is_fallback = True
        context.message = _broadened_message(fallback_query)

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    logger.info("Pipeline returned %d places in %.1f ms", len(results), elapsed_ms)

    return AgentResponse(status="success", data=results, context=context)
