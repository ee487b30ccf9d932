"""Health score heuristics for meal records."""

import math
import re
from collections.abc import Iterable

from food_relay.domain.nutrients import finite_float

MIN_SCORE = 1
MAX_SCORE = 10
BASE_SCORE = 5

_SCORE_PATTERN = re.compile(r"(-?\d+(?:\.\d+)?)")

HEALTHY_GROUPS: dict[str, tuple[str, ...]] = {
    "vegetables": (
        "vegetable",
        "broccoli",
        "spinach",
        "kale",
        "lettuce",
        "salad",
        "carrot",
        "tomato",
        "pepper",
        "cucumber",
        "zucchini",
        "cabbage",
    ),
    "whole_grains": (
        "whole grain",
        "whole wheat",
        "brown rice",
        "quinoa",
        "oat",
        "barley",
        "buckwheat",
    ),
    "lean_protein": (
        "chicken breast",
        "turkey",
        "fish",
        "salmon",
        "tuna",
        "tofu",
        "lentil",
        "bean",
        "egg white",
    ),
    "healthy_fats": ("olive oil", "avocado", "nut", "almond", "walnut", "seed"),
}

UNHEALTHY_GROUPS: dict[str, tuple[str, ...]] = {
    "fried": ("fried", "fries", "tempura", "crispy", "battered"),
    "added_sugar": ("sugar", "syrup", "candy", "chocolate", "soda", "sweetened", "frosting"),
    "cream_butter_cheese": ("cream", "butter", "cheese"),
    "processed_meat": ("bacon", "sausage", "salami", "ham", "pepperoni", "hot dog"),
}


def clamp_score(score: float) -> int:
    """Round half up and clamp into the 1-10 range; NaN scores as the base."""
    if math.isnan(score):
        return BASE_SCORE
    if math.isinf(score):
        return MAX_SCORE if score > 0 else MIN_SCORE
    return max(MIN_SCORE, min(MAX_SCORE, math.floor(score + 0.5)))


def format_score(score: int) -> str:
    return f"{score}/10"


def macro_health_score(protein: float, vitamin_c: float, fat: float, calories: float) -> int:
    """Score from totals: (protein*0.5 + vitC*0.3) / (fat*0.3 + kcal/100)."""
    denominator = fat * 0.3 + calories / 100
    if denominator <= 0:
        return BASE_SCORE
    return clamp_score((protein * 0.5 + vitamin_c * 0.3) / denominator)


def keyword_health_score(ingredient_names: Iterable[str]) -> int:
    """Score ingredient names: +1 per healthy group, -1 per unhealthy group."""
    text = " ".join(ingredient_names).lower()
    score = BASE_SCORE
    for keywords in HEALTHY_GROUPS.values():
        if _mentions_any(text, keywords):
            score += 1
    for keywords in UNHEALTHY_GROUPS.values():
        if _mentions_any(text, keywords):
            score -= 1
    return clamp_score(score)


def coerce_health_score(value: object) -> str | None:
    """Return a `N/10` string for a model-supplied score, or None if unusable."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = finite_float(value)
    elif isinstance(value, str):
        match = _SCORE_PATTERN.search(value)
        number = finite_float(match.group(1)) if match else None
    else:
        number = None
    if number is None:
        return None
    return format_score(clamp_score(number))


def _mentions_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(re.search(rf"\b{re.escape(keyword)}", text) for keyword in keywords)
