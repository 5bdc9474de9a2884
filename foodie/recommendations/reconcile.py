from __future__ import annotations

from typing import Callable, Sequence

from .models import Annotation, EnrichedCandidate, RecommendationResult

CandidateMatcher = Callable[[Annotation, Sequence[EnrichedCandidate]], EnrichedCandidate | None]


# ---------------------------------------------------------------------------
# Matching strategies
# ---------------------------------------------------------------------------


def match_by_id(annotation: Annotation, candidates: Sequence[EnrichedCandidate]) -> EnrichedCandidate | None:
    if not annotation.place_id:
        return None
    return next((c for c in candidates if c.unique_id == annotation.place_id), None)


def match_by_exact_name(
    annotation: Annotation, candidates: Sequence[EnrichedCandidate]
) -> EnrichedCandidate | None:
    name = annotation.name.strip().lower()
    if not name:
        return None
    return next((c for c in candidates if c.title.strip().lower() == name), None)


def match_by_substring(
    annotation: Annotation, candidates: Sequence[EnrichedCandidate]
) -> EnrichedCandidate | None:
    name = annotation.name.strip().lower()
    if not name:
        return None
    return next((c for c in candidates if name in c.title.lower()), None)


def match_first(annotation: Annotation, candidates: Sequence[EnrichedCandidate]) -> EnrichedCandidate | None:
    # Last resort; may mis-attribute when the model renames a place
    return candidates[0] if candidates else None


def chain_matchers(*matchers: CandidateMatcher) -> CandidateMatcher:
    def match(annotation: Annotation, candidates: Sequence[EnrichedCandidate]) -> EnrichedCandidate | None:
        for matcher in matchers:
            found = matcher(annotation, candidates)
            if found is not None:
                return found
        return None

    return match


match_candidate = chain_matchers(match_by_id, match_by_exact_name, match_by_substring, match_first)


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


def _merge(candidate: EnrichedCandidate, annotation: Annotation) -> RecommendationResult:
    return RecommendationResult(
        name=annotation.name or candidate.title,
        unique_id=candidate.unique_id,
        address=candidate.address or annotation.address or "",
        rating=candidate.rating if candidate.rating is not None else annotation.rating,
        rating_count=candidate.rating_count,
        phone=candidate.phone or annotation.phone or "",
        website=candidate.website or annotation.website or "",
        link=candidate.link or annotation.link or "",
        categories=candidate.categories or annotation.categories or [],
        is_relevant=annotation.is_relevant,
        match_reason=annotation.match_reason or "",
        famous_dishes=list(annotation.famous_dishes),
        tip=annotation.tip or None,
        note=annotation.note or None,
    )


def reconcile(
    candidates: Sequence[EnrichedCandidate],
    annotations: Sequence[Annotation],
    matcher: CandidateMatcher = match_candidate,
) -> list[RecommendationResult]:
    """
    Attach AI verdicts to the provider records they describe.

    Provider facts win; annotation facts only fill empty fields. Without any
    annotations every candidate is returned with neutral subjective fields.
    """
    if not candidates:
        return []

    if not annotations:
        return [_merge(c, Annotation(name=c.title, place_id=c.unique_id)) for c in candidates]

    results: list[RecommendationResult] = []
    for annotation in annotations:
        candidate = matcher(annotation, candidates)
        if candidate is None:
            continue
        results.append(_merge(candidate, annotation))
    return results
