from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from foodie.judge.analyzer import (
    NO_REVIEWS_TEXT,
    analyze_places,
    default_fallback_query,
    get_fallback_query,
)
from foodie.judge.heuristics import dishes_for_categories
from foodie.judge.schemas import AnalysisPayload
from foodie.recommendations.models import clean_dishes


def _verdict(name: str, **extra) -> dict:
    return {"name": name, "match_reason": f"{name} is loved for its food.", **extra}


# ── Schema ───────────────────────────────────────────────────────────────


class TestAnalysisPayload:
    def test_current_schema(self):
        payload = AnalysisPayload.model_validate({
            "schema_version": 2,
            "place_analysis": [_verdict("Slice", id="cid-1", confidence=0.9, famous_dishes=["Margherita"])],
        })
        item = payload.place_analysis[0]
        assert item.place_id == "cid-1"
        assert item.famous_dishes == ["Margherita"]

    def test_legacy_keys(self):
        payload = AnalysisPayload.model_validate({
            "recommendations": [{"name": "Slice", "why_love": "Thin crust.", "Tip": "Go early."}],
        })
        item = payload.place_analysis[0]
        assert payload.schema_version == 2
        assert item.match_reason == "Thin crust."
        assert item.tip == "Go early."

    def test_rejects_unknown_version(self):
        with pytest.raises(ValidationError):
            AnalysisPayload.model_validate({"schema_version": 9, "place_analysis": []})

    def test_requires_name(self):
        with pytest.raises(ValidationError):
            AnalysisPayload.model_validate({"place_analysis": [{"match_reason": "nameless"}]})

    def test_non_list_dishes_become_empty(self):
        payload = AnalysisPayload.model_validate({"place_analysis": [_verdict("Slice", famous_dishes="Pizza")]})
        assert payload.place_analysis[0].famous_dishes == []


def test_clean_dishes_drops_praise_and_junk():
    dishes = [
        "Butter Chicken",
        "food is awesome",
        "",
        42,
        "butter chicken",
        "Great vibes",
        "123",
        "x" * 81,
        "Dal Makhani",
        "Naan",
        "Lassi",
        "Kulfi",
        "Chaat",
    ]
    assert clean_dishes(dishes) == ["Butter Chicken", "Dal Makhani", "Naan", "Lassi", "Kulfi"]


# ── Analysis ─────────────────────────────────────────────────────────────


class TestAnalyzePlaces:
    def test_empty_input_skips_providers(self, make_provider, make_strategy):
        primary = make_provider("groq", json_result={"place_analysis": [_verdict("x")]})
        assert analyze_places([], "pizza", make_strategy(primary=primary)) == []
        primary.complete_json.assert_not_called()

    def test_primary_verdicts(self, make_provider, make_strategy, enriched_factory):
        candidates = [enriched_factory("Slice", scraped_content="Try the margherita")]
        primary = make_provider("groq", json_result={
            "schema_version": 2,
            "place_analysis": [_verdict("Slice", id="Slice", famous_dishes=["Margherita", "nice"])],
        })

        annotations = analyze_places(candidates, "pizza", make_strategy(primary=primary))

        assert [a.name for a in annotations] == ["Slice"]
        assert annotations[0].place_id == "Slice"
        assert annotations[0].famous_dishes == ["Margherita"]

    def test_prompt_carries_ids_and_placeholder_text(self, make_provider, make_strategy, enriched_factory):
        candidates = [enriched_factory("Slice"), enriched_factory("Crust", scraped_content="Wood-fired")]
        primary = make_provider("groq", json_result={"place_analysis": [_verdict("Slice")]})

        analyze_places(candidates, "pizza", make_strategy(primary=primary))

        user_message = primary.complete_json.call_args.args[1]
        places = json.loads(user_message.split("PLACES:\n", 1)[1])
        assert [p["id"] for p in places] == ["Slice", "Crust"]
        assert places[0]["text"] == NO_REVIEWS_TEXT
        assert places[1]["text"] == "Wood-fired"

    def test_malformed_primary_escalates_to_secondary(self, make_provider, make_strategy, enriched_factory):
        primary = make_provider("groq", json_result={"verdicts": "oops"})
        secondary = make_provider("gemini", json_result={"place_analysis": [_verdict("Slice")]})

        annotations = analyze_places([enriched_factory("Slice")], "pizza", make_strategy(primary, secondary))

        assert annotations[0].match_reason == "Slice is loved for its food."
        secondary.complete_json.assert_called_once()

    def test_empty_verdict_list_escalates(self, make_provider, make_strategy, enriched_factory):
        primary = make_provider("groq", json_result={"place_analysis": []})
        secondary = make_provider("gemini", json_result={"place_analysis": [_verdict("Slice")]})

        annotations = analyze_places([enriched_factory("Slice")], "pizza", make_strategy(primary, secondary))

        assert [a.name for a in annotations] == ["Slice"]

    def test_heuristic_when_all_providers_fail(self, make_strategy, enriched_factory):
        candidates = [enriched_factory("Slice Shop", categories=["Pizza restaurant"])]

        annotations = analyze_places(candidates, "pizza", make_strategy())

        assert len(annotations) == 1
        assert annotations[0].place_id == "Slice Shop"
        assert annotations[0].famous_dishes == ["Pepperoni Pizza", "Garlic Bread"]
        assert annotations[0].match_reason == "A well-liked pizza restaurant nearby, rated 4.2."

    def test_failed_primary_is_skipped_on_next_request(self, make_provider, make_strategy, enriched_factory):
        primary = make_provider("groq", fail=True)
        secondary = make_provider("gemini", json_result={"place_analysis": [_verdict("Slice")]})
        strategy = make_strategy(primary, secondary, reset_after_seconds=None)
        candidates = [enriched_factory("Slice")]

        analyze_places(candidates, "pizza", strategy)
        analyze_places(candidates, "pizza", strategy)

        assert primary.complete_json.call_count == 1
        assert secondary.complete_json.call_count == 2


def test_dishes_for_categories_uses_title_too():
    assert dishes_for_categories([], "Hyderabad Biryani House") == ["Chicken Biryani", "Mirchi Ka Salan"]
    assert dishes_for_categories(["Gas station"]) == []


# ── Fallback query ───────────────────────────────────────────────────────


class TestFallbackQuery:
    def test_model_suggestion_keeps_location(self, make_provider, make_strategy):
        primary = make_provider("groq", text_result='"Ice Cream Shop in Mau"\nBecause fruit ice cream is rare.')
        assert get_fallback_query("Fruit Ice Cream", "Mau", make_strategy(primary=primary)) == "Ice Cream Shop in Mau"

    def test_location_appended_when_missing(self, make_provider, make_strategy):
        primary = make_provider("groq", text_result="Asian Food")
        assert get_fallback_query("Sushi", "Mau", make_strategy(primary=primary)) == "Asian Food in Mau"

    def test_empty_suggestion_escalates(self, make_provider, make_strategy):
        primary = make_provider("groq", text_result="   ")
        secondary = make_provider("gemini", text_result="Best Rated Restaurants in Goa")
        assert get_fallback_query("rooftop jazz bar", "Goa", make_strategy(primary, secondary)) == (
            "Best Rated Restaurants in Goa"
        )

    def test_default_when_all_providers_fail(self, make_strategy):
        assert get_fallback_query("Sushi", "Mau", make_strategy()) == "Restaurants in Mau"

    def test_default_without_location(self):
        assert default_fallback_query("Sushi", "") == "Restaurants"

    def test_location_match_ignores_case(self, make_provider, make_strategy):
        primary = make_provider("groq", text_result="Ice Cream Shop in mau")
        assert get_fallback_query("Fruit Ice Cream", "Mau", make_strategy(primary=primary)) == "Ice Cream Shop in mau"
