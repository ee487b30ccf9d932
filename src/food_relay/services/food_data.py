"""Canonicalize nutrient maps in food-level nutrition payloads."""

from food_relay.domain.nutrients import coerce_entry, coerce_map, parse_amount
from food_relay.domain.nutrition import NutrientCategory

# Nutrients the prompts ask for at both the root and inside `other_nutrients`.
MIRRORED_NUTRIENTS = ("cholesterol", "omega_3", "omega_6")

_NESTED_MAPS = {
    "vitamins": NutrientCategory.VITAMIN,
    "minerals": NutrientCategory.MINERAL,
    "other_nutrients": NutrientCategory.OTHER,
}


def normalize_food_payload(payload: dict[str, object]) -> dict[str, object]:
    """Return a copy with canonical nutrient maps and mirrored root values."""
    result = dict(payload)
    for field_name, category in _NESTED_MAPS.items():
        if field_name in result:
            entries = coerce_map(category, result[field_name])
            result[field_name] = {key: entry.model_dump() for key, entry in entries.items()}

    other = result.get("other_nutrients")
    other_nutrients: dict[str, object] = other if isinstance(other, dict) else {}
    for key in MIRRORED_NUTRIENTS:
        root_value = result.get(key)
        if key not in other_nutrients and parse_amount(root_value) is not None:
            entry = coerce_entry(NutrientCategory.OTHER, key, root_value)
            other_nutrients[key] = entry.model_dump()
        nested = other_nutrients.get(key)
        if parse_amount(root_value) is None and isinstance(nested, dict):
            result[key] = nested["amount"]
    if other_nutrients:
        result["other_nutrients"] = other_nutrients

    ingredients = result.get("ingredients")
    if isinstance(ingredients, list):
        result["ingredients"] = [
            normalize_food_payload(item) if isinstance(item, dict) else item
            for item in ingredients
        ]
    return result
