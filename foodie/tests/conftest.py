from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from foodie.errors import ProviderError
from foodie.llm.providers import Provider, ProviderStrategy
from foodie.recommendations.models import EnrichedCandidate, PlaceCandidate


def _provider(name, json_result=None, text_result=None, fail=False):
    complete_json = MagicMock(name=f"{name}.complete_json")
    complete_text = MagicMock(name=f"{name}.complete_text")
    if fail:
        complete_json.side_effect = ProviderError(f"{name} down")
        complete_text.side_effect = ProviderError(f"{name} down")
    else:
        complete_json.return_value = json_result if json_result is not None else {}
        complete_text.return_value = text_result or ""
    return Provider(name, complete_json, complete_text)


@pytest.fixture
def make_provider():
    return _provider


@pytest.fixture
def make_strategy():
    def factory(primary: Provider | None = None, secondary: Provider | None = None, **kwargs):
        providers = [primary or _provider("groq", fail=True), secondary or _provider("gemini", fail=True)]
        return ProviderStrategy(providers, **kwargs)

    return factory


def make_place(title: str, **overrides) -> PlaceCandidate:
    data = {
        "title": title,
        "address": "Connaught Place, New Delhi, Delhi",
        "rating": 4.2,
        "link": f"https://www.google.com/maps/search/?api=1&query={title.replace(' ', '+')}",
        "unique_id": title,
    }
    data.update(overrides)
    return PlaceCandidate(**data)


def make_enriched(title: str, scraped_content: str = "", **overrides) -> EnrichedCandidate:
    return EnrichedCandidate(**make_place(title, **overrides).model_dump(), scraped_content=scraped_content)


@pytest.fixture
def place_factory():
    return make_place


@pytest.fixture
def enriched_factory():
    return make_enriched
