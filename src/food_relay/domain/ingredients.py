"""Ingredient label parsing and formatting."""

import re

from food_relay.domain.nutrients import finite_float

_WEIGHT_PATTERN = re.compile(r"\(([^)]+)\)")
_CALORIES_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*kcal", re.IGNORECASE)


def parse_ingredient_label(label: str) -> tuple[str, str | None, float | None]:
    """Split `Name (weight) Nkcal` into its name, weight and calories."""
    weight_match = _WEIGHT_PATTERN.search(label)
    calories_match = _CALORIES_PATTERN.search(label)
    weight = weight_match.group(1).strip() if weight_match else None
    calories = finite_float(calories_match.group(1)) if calories_match else None
    if weight_match:
        name = label.split("(")[0].strip()
    elif calories_match:
        name = label[: calories_match.start()].strip()
    else:
        name = label.strip()
    return name, weight, calories


def format_ingredient_label(name: str, weight: str, calories: float) -> str:
    return f"{name} ({weight}) {format_number(calories)}kcal"


def format_number(value: float) -> str:
    """Render whole numbers without a trailing `.0`."""
    if float(value).is_integer():
        return str(int(value))
    return str(round(value, 1))
