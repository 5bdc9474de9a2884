"""Deterministic last-resort verdicts used when every model provider is down."""
from __future__ import annotations

from ..recommendations.models import Annotation, EnrichedCandidate

CATEGORY_DISHES: list[tuple[str, list[str]]] = [
    ("pizza", ["Pepperoni Pizza", "Garlic Bread"]),
    ("burger", ["Classic Cheeseburger", "Fries"]),
    ("biryani", ["Chicken Biryani", "Mirchi Ka Salan"]),
    ("chinese", ["Hakka Noodles", "Chilli Paneer"]),
    ("south indian", ["Masala Dosa", "Filter Coffee"]),
    ("bakery", ["Croissant", "Chocolate Pastry"]),
    ("ice cream", ["Sundae", "Seasonal Scoop"]),
    ("dessert", ["Brownie", "Gulab Jamun"]),
    ("sweet", ["Rasgulla", "Kaju Katli"]),
    ("cafe", ["Cappuccino", "Cold Coffee"]),
    ("coffee", ["Cappuccino", "Cold Coffee"]),
    ("street food", ["Pani Puri", "Aloo Tikki Chaat"]),
    ("chaat", ["Pani Puri", "Dahi Bhalla"]),
    ("north indian", ["Butter Chicken", "Garlic Naan"]),
    ("punjabi", ["Dal Makhani", "Butter Naan"]),
    ("mughlai", ["Mutton Korma", "Seekh Kebab"]),
    ("italian", ["Penne Arrabbiata", "Tiramisu"]),
    ("seafood", ["Fish Curry", "Prawn Fry"]),
]


def dishes_for_categories(categories: list[str], title: str = "") -> list[str]:
    haystack = " ".join([*categories, title]).lower()
    for keyword, dishes in CATEGORY_DISHES:
        if keyword in haystack:
            return list(dishes)
    return []


def heuristic_annotations(candidates: list[EnrichedCandidate], mood: str) -> list[Annotation]:
    annotations: list[Annotation] = []
    for candidate in candidates:
        kind = candidate.categories[0] if candidate.categories else "local favourite"
        reason = f"A well-liked {kind.lower()} nearby"
        if candidate.rating:
            reason += f", rated {candidate.rating:g}"
            if candidate.rating_count:
                reason += f" by {candidate.rating_count} diners"
        reason += "."

        annotations.append(
            Annotation(
                name=candidate.title,
                place_id=candidate.unique_id,
                is_relevant=True,
                match_reason=reason,
                famous_dishes=dishes_for_categories(candidate.categories, candidate.title),
                tip="Check opening hours before you head out.",
            )
        )
    return annotations
