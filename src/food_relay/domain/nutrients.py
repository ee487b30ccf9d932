"""Nutrient key canonicalization, unit table, and value coercion."""

import math
import re

from food_relay.domain.nutrition import NutrientCategory, NutrientEntry, NutrientMap

_VITAMIN_PATTERN = re.compile(r"^vitamin[\s_-]*([a-z0-9]+)$")
_SHORT_VITAMIN_PATTERN = re.compile(r"^[a-z]\d{0,2}$")
_SEPARATOR_PATTERN = re.compile(r"[\s-]+")
_AMOUNT_PATTERN = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*([a-zA-Zµμ]+)?")

# Ordered substring rules; the first matching rule wins.
_UNIT_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("vitamin_d",), "IU"),
    (
        (
            "vitamin_a",
            "vitamin_k",
            "vitamin_b7",
            "vitamin_b9",
            "vitamin_b12",
            "folate",
            "biotin",
            "selenium",
            "chromium",
            "molybdenum",
            "iodine",
            "copper",
        ),
        "mcg",
    ),
    (
        (
            "sodium",
            "potassium",
            "calcium",
            "phosphorus",
            "magnesium",
            "iron",
            "zinc",
            "chloride",
            "fluoride",
            "manganese",
            "cholesterol",
            "omega_3",
            "caffeine",
        ),
        "mg",
    ),
    (("fiber", "sugar", "saturated_fat", "trans_fat", "omega_6"), "g"),
)

_CATEGORY_DEFAULT_UNITS = {
    NutrientCategory.VITAMIN: "mg",
    NutrientCategory.MINERAL: "mg",
    NutrientCategory.OTHER: "g",
}

MINERAL_KEYS = frozenset(
    {
        "calcium",
        "chloride",
        "chromium",
        "copper",
        "fluoride",
        "iodine",
        "iron",
        "magnesium",
        "manganese",
        "molybdenum",
        "phosphorus",
        "potassium",
        "selenium",
        "sodium",
        "zinc",
    }
)

OTHER_NUTRIENT_KEYS = frozenset(
    {
        "fiber",
        "cholesterol",
        "sugar",
        "saturated_fat",
        "saturated_fats",
        "trans_fat",
        "omega_3",
        "omega_6",
    }
)

_VITAMIN_ALIASES = frozenset({"folate", "biotin", "niacin", "riboflavin", "thiamin"})

_MASS_FACTORS = {"g": 1.0, "mg": 1e-3, "mcg": 1e-6}
_UNIT_ALIASES = {
    "µg": "mcg",
    "μg": "mcg",
    "ug": "mcg",
    "iu": "IU",
}
_VITAMIN_D_IU_PER_MCG = 40.0


def normalize_nutrient_key(key: str) -> str:
    """Canonicalize a nutrient key: lowercase, underscored, `vitamin_<x>`."""
    lowered = key.strip().lower()
    if not lowered:
        return ""
    match = _VITAMIN_PATTERN.match(lowered)
    if match:
        return f"vitamin_{match.group(1)}"
    return _SEPARATOR_PATTERN.sub("_", lowered)


def canonical_vitamin_key(key: str) -> str:
    """Expand short vitamin keys such as `c` or `b12` inside vitamin maps."""
    normalized = normalize_nutrient_key(key)
    if _SHORT_VITAMIN_PATTERN.match(normalized):
        return f"vitamin_{normalized}"
    return normalized


def unit_for(category: NutrientCategory, key: str) -> str:
    """Return the canonical unit for a nutrient key."""
    canonical = normalize_nutrient_key(key)
    for needles, unit in _UNIT_RULES:
        if any(needle in canonical for needle in needles):
            return unit
    return _CATEGORY_DEFAULT_UNITS[category]


def categorize_key(key: str) -> NutrientCategory | None:
    """Classify a flat nutrient key, or return None for non-nutrient keys."""
    canonical = normalize_nutrient_key(key)
    if canonical.startswith("vitamin_") or canonical in _VITAMIN_ALIASES:
        return NutrientCategory.VITAMIN
    if canonical in MINERAL_KEYS:
        return NutrientCategory.MINERAL
    if canonical in OTHER_NUTRIENT_KEYS:
        return NutrientCategory.OTHER
    return None


def parse_amount(value: object) -> tuple[float, str | None] | None:
    """Read a number-or-unit-string value into an amount and optional unit."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = finite_float(value)
        return None if number is None else (number, None)
    if isinstance(value, str):
        match = _AMOUNT_PATTERN.match(value.replace(",", ""))
        if not match:
            return None
        number = finite_float(match.group(1))
        if number is None:
            return None
        unit = match.group(2)
        return number, _canonical_unit(unit) if unit else None
    if isinstance(value, dict) and "amount" in value:
        parsed = parse_amount(value["amount"])
        if parsed is None:
            return None
        raw_unit = value.get("unit")
        if isinstance(raw_unit, str) and raw_unit.strip():
            return parsed[0], _canonical_unit(raw_unit.strip())
        return parsed
    return None


def finite_float(value: int | float | str) -> float | None:
    """Convert to float, or None when the result would be infinite or NaN."""
    try:
        number = float(value)
    except (OverflowError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def coerce_entry(category: NutrientCategory, key: str, value: object) -> NutrientEntry:
    """Convert a raw nutrient value into an entry with the canonical unit."""
    unit = unit_for(category, key)
    parsed = parse_amount(value)
    if parsed is None:
        return NutrientEntry(amount=0.0, unit=unit)
    amount, source_unit = parsed
    converted = _convert(amount, source_unit, unit, key)
    if not math.isfinite(converted):
        converted = 0.0
    return NutrientEntry(amount=converted, unit=unit)


def coerce_map(category: NutrientCategory, raw: object) -> NutrientMap:
    """Coerce a raw nutrient mapping into canonical keys and entries."""
    if not isinstance(raw, dict):
        return {}
    entries: NutrientMap = {}
    for raw_key, value in raw.items():
        if not isinstance(raw_key, str):
            continue
        if category is NutrientCategory.VITAMIN:
            key = canonical_vitamin_key(raw_key)
        else:
            key = normalize_nutrient_key(raw_key)
        if not key:
            continue
        entries[key] = coerce_entry(category, key, value)
    return entries


def _canonical_unit(unit: str) -> str:
    lowered = unit.lower()
    return _UNIT_ALIASES.get(lowered, lowered)


def _convert(amount: float, source_unit: str | None, target_unit: str, key: str) -> float:
    """Convert between mass units, and mcg/IU for vitamin D."""
    if source_unit is None or source_unit == target_unit:
        return amount
    if source_unit in _MASS_FACTORS and target_unit in _MASS_FACTORS:
        converted = amount * _MASS_FACTORS[source_unit] / _MASS_FACTORS[target_unit]
        return round(converted, 4)
    if "vitamin_d" in key:
        if source_unit == "mcg" and target_unit == "IU":
            return round(amount * _VITAMIN_D_IU_PER_MCG, 4)
        if source_unit == "IU" and target_unit == "mcg":
            return round(amount / _VITAMIN_D_IU_PER_MCG, 4)
    return amount
