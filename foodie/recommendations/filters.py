from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..intent.models import RefinedIntent
from .models import PlaceCandidate

SUBJECT_STOP_WORDS = frozenset(
    {"in", "near", "best", "top", "famous", "hot", "spicy", "places", "restaurants"}
)

_TOKEN_RE = re.compile(r"[\w']+")


@dataclass
class FilterResult:
    kept: list[PlaceCandidate] = field(default_factory=list)
    fallback_message: str | None = None
    # Location containment emptied the set; caller should broaden the search
    needs_broadening: bool = False


def alternatives_message(subject: str) -> str:
    return (
        f'We couldn\'t find exact matches for "{subject}" in this area. '
        "Here are some popular alternatives instead."
    )


def filter_by_location(candidates: list[PlaceCandidate], location: str) -> list[PlaceCandidate]:
    """Keep candidates whose address mentions the location's first segment."""
    city = (location or "").split(",")[0].strip().lower()
    if not city:
        return list(candidates)
    return [c for c in candidates if city in (c.address or "").lower()]


def main_subject(raw_query: str) -> str | None:
    for token in _TOKEN_RE.findall((raw_query or "").lower()):
        if token in SUBJECT_STOP_WORDS:
            continue
        if len(token) > 2:
            return token
    return None


def searchable_text(candidate: PlaceCandidate) -> str:
    """Lower-cased field values a subject can match; field names never count."""
    return " ".join([candidate.title, candidate.address, candidate.website, *candidate.categories]).lower()


def partition_by_subject(
    candidates: list[PlaceCandidate],
    subject: str,
) -> tuple[list[PlaceCandidate], list[PlaceCandidate]]:
    exact: list[PlaceCandidate] = []
    alternatives: list[PlaceCandidate] = []
    for candidate in candidates:
        if subject in searchable_text(candidate):
            exact.append(candidate)
        else:
            alternatives.append(candidate)
    return exact, alternatives


def filter_candidates(
    candidates: list[PlaceCandidate],
    intent: RefinedIntent,
    raw_query: str,
    enforce_location: bool = True,
) -> FilterResult:
    """
    Apply location containment, then literal subject matching.

    When nothing matches the subject, the alternatives are kept and a
    user-facing message names what was missing.
    """
    kept = list(candidates)

    if enforce_location and intent.location_string and kept:
        kept = filter_by_location(kept, intent.location_string)
        if not kept:
            return FilterResult(needs_broadening=True)

    if not kept:
        return FilterResult(needs_broadening=enforce_location)

    subject = main_subject(raw_query)
    if not subject:
        return FilterResult(kept=kept)

    exact, alternatives = partition_by_subject(kept, subject)
    if exact:
        return FilterResult(kept=exact)
    return FilterResult(kept=alternatives, fallback_message=alternatives_message(subject))
