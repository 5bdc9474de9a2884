from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable
from urllib.parse import quote

import httpx

from ..errors import ConfigurationError
from ..recommendations.models import PlaceCandidate
from .config import DEFAULT_SERPER_CONFIG, SerperConfig

logger = logging.getLogger(__name__)

ADDRESS_NOT_AVAILABLE = "Address not available"

_ADDRESS_FIELDS = ("address", "formatted_address", "formattedAddress", "vicinity")
_COMPOUND_SPLIT_RE = re.compile(r",| and ")
_FILLER_RE = re.compile(r"\b(?:hidden gems|authentic|famous|best|top|places)\b", re.IGNORECASE)
_SPACES_RE = re.compile(r"\s+")
_MAPS_BASE = "https://www.google.com/maps"


# ---------------------------------------------------------------------------
# Query splitting
# ---------------------------------------------------------------------------


def split_query(query: str) -> list[str]:
    """
    Break a compound query into keyword sub-queries.

    "Awadhi cuisine, street food and best cafes" ->
    ["Awadhi cuisine", "street food", "cafes"]
    """
    stripped = query.strip()
    if "," not in query and " and " not in query:
        return [stripped] if stripped else []

    parts: list[str] = []
    for raw in _COMPOUND_SPLIT_RE.split(query):
        part = _SPACES_RE.sub(" ", _FILLER_RE.sub("", raw)).strip()
        if len(part) > 2:
            parts.append(part)

    if parts:
        return parts
    return [stripped] if len(stripped) > 2 else []


def build_search_string(sub_query: str, location: str) -> str:
    if not location or location.lower() in sub_query.lower():
        return sub_query
    return f"{sub_query} near {location}"


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------


def _first_present(raw: dict[str, Any], fields: Iterable[str]) -> Any:
    for field in fields:
        value = raw.get(field)
        if value not in (None, "", []):
            return value
    return None


def maps_link(title: str, address: str, cid: str | None, place_id: str | None) -> str:
    if cid:
        return f"{_MAPS_BASE}?cid={cid}"
    if place_id:
        return f"{_MAPS_BASE}/search/?api=1&query=Google&query_place_id={place_id}"
    return f"{_MAPS_BASE}/search/?api=1&query={quote(f'{title} {address}')}"


def _as_float(value: Any) -> float | None:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _as_int(value: Any) -> int | None:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _categories(raw: dict[str, Any]) -> list[str]:
    value = _first_present(raw, ("categories", "category", "types", "type"))
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(v) for v in value if v]
    return []


def normalize_place(raw: dict[str, Any]) -> PlaceCandidate:
    title = str(raw.get("title") or raw.get("name") or "").strip()
    address = str(_first_present(raw, _ADDRESS_FIELDS) or ADDRESS_NOT_AVAILABLE)
    cid = str(raw["cid"]) if raw.get("cid") else None
    place_id_raw = _first_present(raw, ("place_id", "placeId"))
    place_id = str(place_id_raw) if place_id_raw else None

    return PlaceCandidate(
        title=title,
        address=address,
        rating=_as_float(raw.get("rating")),
        rating_count=_as_int(_first_present(raw, ("ratingCount", "userRatingCount", "user_ratings_total"))),
        link=maps_link(title, address, cid, place_id),
        website=str(raw.get("website") or ""),
        phone=str(_first_present(raw, ("phoneNumber", "phone", "formatted_phone_number")) or ""),
        categories=_categories(raw),
        cid=cid,
        place_id=place_id,
        unique_id=cid or place_id or title,
    )


def dedupe_places(places: Iterable[PlaceCandidate]) -> list[PlaceCandidate]:
    """Drop repeats of the same unique_id, keeping first-seen order."""
    seen: set[str] = set()
    unique: list[PlaceCandidate] = []
    for place in places:
        if place.unique_id in seen:
            continue
        seen.add(place.unique_id)
        unique.append(place)
    return unique


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


def _search_one(
    client: httpx.Client,
    sub_query: str,
    location: str,
    config: SerperConfig,
) -> list[PlaceCandidate]:
    payload = {
        "q": build_search_string(sub_query, location),
        "location": location,
        "gl": config.region,
        "hl": config.language,
    }
    try:
        response = client.post(
            config.places_url,
            json=payload,
            headers={"X-API-KEY": config.api_key, "Content-Type": "application/json"},
        )
        response.raise_for_status()
        raw_places = response.json().get("places") or []
    except (httpx.HTTPError, ValueError, AttributeError):
        logger.warning("Search failed for sub-query %r", sub_query, exc_info=True)
        return []

    if not isinstance(raw_places, list):
        logger.warning("Unexpected places payload for sub-query %r: %s", sub_query, type(raw_places).__name__)
        return []

    return [normalize_place(p) for p in raw_places if isinstance(p, dict)]


def search_places(
    query: str,
    location: str,
    config: SerperConfig = DEFAULT_SERPER_CONFIG,
    client: httpx.Client | None = None,
    split: bool = True,
) -> list[PlaceCandidate]:
    """
    Run one places search per sub-query in parallel and merge the results.

    With ``split=False`` the query is searched as a single phrase, which keeps
    a comma in the location from producing a location-only sub-search.

    Raises ConfigurationError when SERPER_API_KEY is missing; individual
    sub-search failures contribute nothing.
    """
    if not config.api_key:
        raise ConfigurationError("SERPER_API_KEY is missing")

    if split:
        sub_queries = split_query(query)
    else:
        sub_queries = [query.strip()] if query.strip() else []
    if not sub_queries:
        return []

    logger.info("Executing %d parallel searches for %s", len(sub_queries), sub_queries)

    owns_client = client is None
    http = client or httpx.Client(timeout=config.timeout)
    try:
        with ThreadPoolExecutor(max_workers=min(config.max_workers, len(sub_queries))) as pool:
            results = list(
                pool.map(lambda q: _search_one(http, q, location, config), sub_queries)
            )
    finally:
        if owns_client:
            http.close()

    return dedupe_places(place for batch in results for place in batch)
