from __future__ import annotations

from foodie.recommendations.models import Annotation
from foodie.recommendations.reconcile import (
    chain_matchers,
    match_by_exact_name,
    match_by_id,
    match_candidate,
    reconcile,
)


def _candidates(enriched_factory):
    return [
        enriched_factory("Karim's", unique_id="cid-1", phone="011 111", scraped_content="mutton korma"),
        enriched_factory("Al Jawahar Restaurant", unique_id="cid-2", phone=""),
    ]


class TestMatching:
    def test_id_wins_over_name(self, enriched_factory):
        candidates = _candidates(enriched_factory)
        found = match_candidate(Annotation(name="Karim's", place_id="cid-2"), candidates)
        assert found.unique_id == "cid-2"

    def test_exact_name_is_case_insensitive(self, enriched_factory):
        found = match_candidate(Annotation(name="al jawahar restaurant"), _candidates(enriched_factory))
        assert found.unique_id == "cid-2"

    def test_substring_name(self, enriched_factory):
        found = match_candidate(Annotation(name="Al Jawahar"), _candidates(enriched_factory))
        assert found.unique_id == "cid-2"

    def test_first_candidate_as_last_resort(self, enriched_factory):
        found = match_candidate(Annotation(name="Somewhere Else"), _candidates(enriched_factory))
        assert found.unique_id == "cid-1"

    def test_custom_chain_can_refuse(self, enriched_factory):
        strict = chain_matchers(match_by_id, match_by_exact_name)
        assert strict(Annotation(name="Somewhere Else"), _candidates(enriched_factory)) is None


class TestReconcile:
    def test_provider_facts_win_and_annotation_backfills(self, enriched_factory):
        annotations = [
            Annotation(name="Karim's", place_id="cid-1", phone="999", famous_dishes=["Mutton Korma"]),
            Annotation(name="Al Jawahar Restaurant", place_id="cid-2", phone="011 222", tip="Go after 9pm."),
        ]

        results = reconcile(_candidates(enriched_factory), annotations)

        assert [r.unique_id for r in results] == ["cid-1", "cid-2"]
        assert results[0].phone == "011 111"
        assert results[0].famous_dishes == ["Mutton Korma"]
        assert results[1].phone == "011 222"
        assert results[1].tip == "Go after 9pm."

    def test_follows_annotation_order(self, enriched_factory):
        annotations = [Annotation(name="x", place_id="cid-2"), Annotation(name="y", place_id="cid-1")]
        results = reconcile(_candidates(enriched_factory), annotations)
        assert [r.unique_id for r in results] == ["cid-2", "cid-1"]

    def test_unmatched_annotation_is_dropped(self, enriched_factory):
        strict = chain_matchers(match_by_id)
        results = reconcile(_candidates(enriched_factory), [Annotation(name="Ghost", place_id="cid-9")], matcher=strict)
        assert results == []

    def test_without_annotations_every_candidate_is_neutral(self, enriched_factory):
        results = reconcile(_candidates(enriched_factory), [])

        assert [r.name for r in results] == ["Karim's", "Al Jawahar Restaurant"]
        assert all(r.match_reason == "" and r.famous_dishes == [] and r.is_relevant for r in results)
        assert all(r.tip is None and r.note is None for r in results)

    def test_no_candidates(self):
        assert reconcile([], [Annotation(name="Karim's")]) == []

    def test_scraped_content_never_leaks(self, enriched_factory):
        results = reconcile(_candidates(enriched_factory), [Annotation(name="Karim's", place_id="cid-1")])
        assert "scraped_content" not in results[0].model_dump()
        assert "mutton korma" not in results[0].model_dump_json()

    def test_is_idempotent(self, enriched_factory):
        candidates = _candidates(enriched_factory)
        annotations = [Annotation(name="Al Jawahar", note="Crowded on weekends.")]
        assert reconcile(candidates, annotations) == reconcile(candidates, annotations)
