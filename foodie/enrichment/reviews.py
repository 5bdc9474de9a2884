from __future__ import annotations

import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Callable

import httpx

from ..recommendations.models import EnrichedCandidate, PlaceCandidate
from .config import DEFAULT_ENRICHMENT_CONFIG, EnrichmentConfig

logger = logging.getLogger(__name__)

REVIEWS_HEADER = "Public Reviews & Highlights:"

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def normalize_url(url: str) -> str:
    """Return an absolute http(s) URL, or "" when the input cannot be used."""
    if not url or not url.strip():
        return ""
    candidate = url.strip()
    if not _SCHEME_RE.match(candidate):
        candidate = f"http://{candidate}"
    try:
        parsed = httpx.URL(candidate)
    except httpx.InvalidURL:
        return ""
    if not parsed.host:
        return ""
    return str(parsed)


def select_top_candidates(candidates: list[PlaceCandidate], limit: int) -> list[PlaceCandidate]:
    """Highest rated first; unrated places count as 0 and keep their order."""
    return sorted(candidates, key=lambda c: c.rating or 0.0, reverse=True)[:limit]


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


def fetch_review_snippets(
    client: httpx.Client,
    candidate: PlaceCandidate,
    config: EnrichmentConfig,
) -> str:
    """Ask the web search provider for review snippets about one place."""
    if not config.serper_api_key:
        return ""

    response = client.post(
        config.search_url,
        json={
            "q": f"reviews of {candidate.title} {candidate.address} food menu must try",
            "gl": config.region,
            "num": config.snippet_count,
        },
        headers={"X-API-KEY": config.serper_api_key, "Content-Type": "application/json"},
    )
    response.raise_for_status()

    organic = response.json().get("organic") or []
    if not isinstance(organic, list):
        return ""

    lines = [
        f'- "{item["snippet"]}" (Source: {item.get("title", "")})'
        for item in organic
        if isinstance(item, dict) and item.get("snippet")
    ]
    if not lines:
        return ""
    return REVIEWS_HEADER + "\n" + "\n".join(lines)


def read_page(client: httpx.Client, url: str, config: EnrichmentConfig) -> str:
    """Fetch a page as markdown through the reader provider."""
    normalized = normalize_url(url)
    if not normalized:
        return ""

    headers = {"X-Respond-With": "markdown", "User-Agent": config.user_agent}
    if config.reader_api_key:
        headers["Authorization"] = f"Bearer {config.reader_api_key}"

    response = client.get(f"{config.reader_base_url}{normalized}", headers=headers)
    response.raise_for_status()
    return response.text


def _attempt(label: str, fetch: Callable[[], str]) -> str:
    try:
        return fetch()
    except (httpx.HTTPError, ValueError, AttributeError, TypeError):
        logger.warning("%s fetch failed", label, exc_info=True)
        return ""


# ---------------------------------------------------------------------------
# Enrichment
# ---------------------------------------------------------------------------


def _unenriched(candidate: PlaceCandidate) -> EnrichedCandidate:
    return EnrichedCandidate(**candidate.model_dump(), scraped_content="")


def enrich_candidate(
    candidate: PlaceCandidate,
    config: EnrichmentConfig = DEFAULT_ENRICHMENT_CONFIG,
    client: httpx.Client | None = None,
) -> EnrichedCandidate:
    """
    Attach review text to a candidate.

    Tries search snippets first, then the reader over the website and then
    the maps link. Failures yield empty content; the candidate is never dropped.
    """
    if not candidate.website and not candidate.link:
        return _unenriched(candidate)

    owns_client = client is None
    http = client or httpx.Client(timeout=config.timeout, follow_redirects=True)
    try:
        content = _attempt("Snippet", lambda: fetch_review_snippets(http, candidate, config))
        for url in (candidate.website, candidate.link):
            if content:
                break
            if url:
                content = _attempt("Reader", lambda: read_page(http, url, config))
    finally:
        if owns_client:
            http.close()

    return EnrichedCandidate(
        **candidate.model_dump(),
        scraped_content=content[: config.max_content_chars],
    )


def enrich_candidates(
    candidates: list[PlaceCandidate],
    config: EnrichmentConfig = DEFAULT_ENRICHMENT_CONFIG,
    client: httpx.Client | None = None,
) -> list[EnrichedCandidate]:
    """Enrich candidates in parallel, each bounded by ``config.timeout``."""
    if not candidates:
        return []

    owns_client = client is None
    http = client or httpx.Client(timeout=config.timeout, follow_redirects=True)
    pool = ThreadPoolExecutor(max_workers=len(candidates))
    try:
        futures = [pool.submit(enrich_candidate, c, config, http) for c in candidates]
        deadline = time.monotonic() + config.timeout

        enriched: list[EnrichedCandidate] = []
        for candidate, future in zip(candidates, futures):
            try:
                enriched.append(future.result(timeout=max(0.0, deadline - time.monotonic())))
            except FutureTimeout:
                logger.warning("Enrichment timed out for %s", candidate.title)
                enriched.append(_unenriched(candidate))
    finally:
        pool.shutdown(wait=False, cancel_futures=True)
        if owns_client:
            http.close()

    return enriched
