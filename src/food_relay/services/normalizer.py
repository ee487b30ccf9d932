"""Reshape parsed model output into the canonical nutrition record."""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field

from food_relay.domain.health_score import (
    coerce_health_score,
    format_score,
    keyword_health_score,
)
from food_relay.domain.heuristics import (
    IMAGE_ANALYSIS_DEFAULTS,
    DefaultRecordProfile,
    HeuristicProfile,
    split_calories,
)
from food_relay.domain.ingredients import format_ingredient_label, parse_ingredient_label
from food_relay.domain.nutrients import (
    categorize_key,
    coerce_entry,
    coerce_map,
    normalize_nutrient_key,
    parse_amount,
)
from food_relay.domain.nutrition import (
    IngredientMacro,
    NutrientCategory,
    NutrientEntry,
    NutrientMap,
    NutritionRecord,
    ParsedCandidate,
)
from food_relay.services.parser import (
    default_record_payload,
    extract_text_record,
    has_text_sentinel,
)

_MAP_FIELDS = {
    NutrientCategory.VITAMIN: ("vitamins",),
    NutrientCategory.MINERAL: ("minerals",),
    NutrientCategory.OTHER: ("other_nutrients", "other"),
}

_logger = logging.getLogger(__name__)


@dataclass
class FormatNormalizer:
    """Builds a `NutritionRecord` from any candidate payload; never raises."""

    defaults: DefaultRecordProfile = IMAGE_ANALYSIS_DEFAULTS
    heuristics: HeuristicProfile = field(default_factory=HeuristicProfile)

    def normalize(self, candidate: ParsedCandidate) -> NutritionRecord:
        """Dispatch on the payload shape and return a canonical record."""
        payload = candidate.payload
        if _text_or_none(payload.get("meal_name")):
            return self._from_record(payload)

        meal = payload.get("meal")
        if isinstance(meal, list) and meal and isinstance(meal[0], dict):
            _logger.info("Normalizing legacy meal array payload")
            return self._from_legacy_meal(meal[0])

        text = payload.get("text")
        if isinstance(text, str) and has_text_sentinel(text):
            _logger.info("Normalizing wrapped text payload")
            return self._from_record(
                extract_text_record(text, self.heuristics, self.defaults)
            )

        if _number_or_none(payload.get("calories")):
            _logger.info("Normalizing flat nutrition payload")
            return self._from_flat(payload)

        _logger.warning("Unrecognized payload shape, using default record")
        return self._from_record(
            default_record_payload(
                self.defaults,
                _dict_or_none(payload.get("vitamins")),
                _dict_or_none(payload.get("minerals")),
            )
        )

    def _from_record(self, payload: dict[str, object]) -> NutritionRecord:
        raw_ingredients = _list_or_empty(payload.get("ingredients"))
        raw_macros = _list_or_empty(payload.get("ingredient_macros"))

        ingredients: list[str] = []
        macros: list[IngredientMacro] = []
        for index, raw_ingredient in enumerate(raw_ingredients):
            label = _ingredient_label(raw_ingredient)
            source = raw_macros[index] if index < len(raw_macros) else raw_ingredient
            ingredients.append(label)
            macros.append(_coerce_macro(source, label))
        if len(raw_macros) != len(raw_ingredients):
            _logger.info(
                "Aligned ingredient_macros (%s) with ingredients (%s)",
                len(raw_macros),
                len(raw_ingredients),
            )

        vitamins, minerals, other_nutrients = _collect_nutrients(payload)
        _backfill(vitamins, (macro.vitamins for macro in macros))
        _backfill(minerals, (macro.minerals for macro in macros))
        _backfill(other_nutrients, (macro.other_nutrients for macro in macros))

        vitamin_c = _number_or_none(payload.get("vitamin_c"))
        if vitamin_c is None and "vitamin_c" in vitamins:
            vitamin_c = vitamins["vitamin_c"].amount

        health_score = coerce_health_score(payload.get("health_score"))
        if health_score is None:
            names = [macro.name or label for macro, label in zip(macros, ingredients)]
            health_score = format_score(keyword_health_score(names))

        return NutritionRecord(
            meal_name=str(payload["meal_name"]).strip(),
            ingredients=ingredients,
            ingredient_macros=macros,
            calories=_total(payload.get("calories"), (m.calories or 0.0 for m in macros)),
            protein=_total(payload.get("protein"), (m.protein for m in macros)),
            fat=_total(payload.get("fat"), (m.fat for m in macros)),
            carbs=_total(payload.get("carbs"), (m.carbs for m in macros)),
            vitamin_c=vitamin_c,
            health_score=health_score,
            vitamins=vitamins,
            minerals=minerals,
            other_nutrients=other_nutrients,
        )

    def _from_legacy_meal(self, item: dict[str, object]) -> NutritionRecord:
        vitamins = coerce_map(NutrientCategory.VITAMIN, item.get("vitamins"))
        minerals = coerce_map(NutrientCategory.MINERAL, item.get("minerals"))
        other_nutrients = coerce_map(NutrientCategory.OTHER, item.get("other_nutrients"))

        raw_ingredients = _list_or_empty(item.get("ingredients")) or [self.defaults.ingredient]
        ingredients: list[str] = []
        macros: list[dict[str, object]] = []
        for raw_ingredient in raw_ingredients:
            label = _ingredient_label(raw_ingredient)
            name, weight, calories = parse_ingredient_label(label)
            if weight is None or calories is None:
                estimate = self.heuristics.estimate_for(name)
                weight = weight or estimate.weight
                calories = estimate.calories if calories is None else calories
                label = format_ingredient_label(name, weight, calories)
            protein, fat, carbs = split_calories(calories, self.heuristics.share_for(name))
            ingredients.append(label)
            macros.append(
                {
                    "name": name,
                    "amount": weight,
                    "calories": calories,
                    "protein": protein,
                    "fat": fat,
                    "carbs": carbs,
                    "vitamins": _dump_map(vitamins),
                    "minerals": _dump_map(minerals),
                    "other_nutrients": _dump_map(other_nutrients),
                }
            )

        nested = _dict_or_none(item.get("macronutrients")) or {}
        return self._from_record(
            {
                "meal_name": _text_or_none(item.get("dish"))
                or _text_or_none(item.get("name"))
                or self.defaults.meal_name,
                "ingredients": ingredients,
                "ingredient_macros": macros,
                "calories": _positive_or_none(item.get("calories")),
                "protein": _positive_or_none(item.get("protein"))
                or _positive_or_none(nested.get("protein")),
                "fat": _positive_or_none(item.get("fat"))
                or _positive_or_none(nested.get("fat")),
                "carbs": _positive_or_none(item.get("carbs"))
                or _positive_or_none(nested.get("carbohydrates")),
                "vitamin_c": item.get("vitamin_c"),
                "health_score": item.get("health_score"),
                "vitamins": _dump_map(vitamins),
                "minerals": _dump_map(minerals),
                "other_nutrients": _dump_map(other_nutrients),
            }
        )

    def _from_flat(self, payload: dict[str, object]) -> NutritionRecord:
        record = dict(payload)
        record["meal_name"] = _text_or_none(payload.get("name")) or self.defaults.meal_name
        if not _list_or_empty(payload.get("ingredients")):
            record["ingredients"] = [self.defaults.ingredient]
        record["protein"] = _positive_or_none(payload.get("protein")) or self.defaults.protein
        record["fat"] = _positive_or_none(payload.get("fat")) or self.defaults.fat
        record["carbs"] = _positive_or_none(payload.get("carbs")) or self.defaults.carbs
        if _number_or_none(payload.get("vitamin_c")) is None:
            record["vitamin_c"] = self.defaults.vitamin_c
        return self._from_record(record)


def _coerce_macro(source: object, label: str) -> IngredientMacro:
    """Coerce one ingredient breakdown; non-objects become zeroed entries."""
    name, weight, calories = parse_ingredient_label(label)
    if not isinstance(source, dict):
        return IngredientMacro(name=name or None, amount=weight, calories=calories)
    vitamins, minerals, other_nutrients = _collect_nutrients(source)
    source_calories = _number_or_none(source.get("calories"))
    return IngredientMacro(
        name=_text_or_none(source.get("name")) or name or None,
        amount=_text_or_none(source.get("amount")) or weight,
        calories=calories if source_calories is None else source_calories,
        protein=_number_or_none(source.get("protein")) or 0.0,
        fat=_number_or_none(source.get("fat")) or 0.0,
        carbs=_number_or_none(source.get("carbs")) or 0.0,
        vitamins=vitamins,
        minerals=minerals,
        other_nutrients=other_nutrients,
    )


def _collect_nutrients(raw: dict[str, object]) -> tuple[NutrientMap, NutrientMap, NutrientMap]:
    """Read nested nutrient maps, then fold in flat nutrient keys."""
    maps: dict[NutrientCategory, NutrientMap] = {}
    for category, fields in _MAP_FIELDS.items():
        entries: NutrientMap = {}
        for field_name in fields:
            for key, entry in coerce_map(category, raw.get(field_name)).items():
                entries.setdefault(key, entry)
        maps[category] = entries

    for raw_key, value in raw.items():
        if not isinstance(raw_key, str):
            continue
        category = categorize_key(raw_key)
        if category is None or parse_amount(value) is None:
            continue
        key = normalize_nutrient_key(raw_key)
        maps[category].setdefault(key, coerce_entry(category, key, value))

    return (
        maps[NutrientCategory.VITAMIN],
        maps[NutrientCategory.MINERAL],
        maps[NutrientCategory.OTHER],
    )


def _backfill(target: NutrientMap, sources: Iterable[NutrientMap]) -> None:
    """Add keys missing from the top-level map as sums across ingredients."""
    sums: dict[str, NutrientEntry] = {}
    for source in sources:
        for key, entry in source.items():
            if key in target:
                continue
            if key in sums:
                amount = round(sums[key].amount + entry.amount, 4)
                if math.isfinite(amount):
                    sums[key] = NutrientEntry(amount=amount, unit=entry.unit)
            else:
                sums[key] = entry
    target.update(sums)


def _total(value: object, parts: Iterable[float]) -> float:
    supplied = _number_or_none(value)
    if supplied is not None:
        return supplied
    total = round(sum(parts), 1)
    return total if math.isfinite(total) else 0.0


def _ingredient_label(raw: object) -> str:
    """Render a raw ingredient as `name (weight) Nkcal` where possible."""
    if isinstance(raw, str):
        return raw.strip()
    if isinstance(raw, dict):
        name = _text_or_none(raw.get("name")) or "Unknown Ingredient"
        amount = _text_or_none(raw.get("amount"))
        calories = _number_or_none(raw.get("calories"))
        if amount and calories is not None:
            return format_ingredient_label(name, amount, calories)
        return name
    return "Unknown Ingredient"


def _dump_map(entries: NutrientMap) -> dict[str, dict[str, object]]:
    return {key: entry.model_dump() for key, entry in entries.items()}


def _number_or_none(value: object) -> float | None:
    parsed = parse_amount(value)
    if parsed is None:
        return None
    return parsed[0]


def _positive_or_none(value: object) -> float | None:
    number = _number_or_none(value)
    if number is None or number <= 0:
        return None
    return number


def _text_or_none(value: object) -> str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _dict_or_none(value: object) -> dict[str, object] | None:
    return value if isinstance(value, dict) else None


def _list_or_empty(value: object) -> list[object]:
    return value if isinstance(value, list) else []
