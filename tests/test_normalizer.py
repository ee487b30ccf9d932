"""Tests for the format normalizer."""

import json
import re

import pytest

from food_relay.domain.heuristics import CALLABLE_DEFAULTS
from food_relay.domain.nutrition import CandidateSource, ParsedCandidate
from food_relay.services.normalizer import FormatNormalizer
from food_relay.services.parser import ResponseParser
from tests.conftest import FOOD_ANALYSIS_TEXT, PASTA_RECORD_JSON

_SCORE = re.compile(r"^(\d{1,2})/10$")


def _normalize(payload: dict[str, object], normalizer: FormatNormalizer | None = None):
    return (normalizer or FormatNormalizer()).normalize(
        ParsedCandidate(CandidateSource.JSON, payload)
    )


def _assert_well_formed(record) -> None:  # type: ignore[no-untyped-def]
    assert len(record.ingredients) == len(record.ingredient_macros)
    match = _SCORE.match(record.health_score)
    assert match
    assert 1 <= int(match.group(1)) <= 10
    json.dumps(record.model_dump(), allow_nan=False)


def test_well_formed_record_is_kept() -> None:
    record = FormatNormalizer().normalize(ResponseParser().parse(PASTA_RECORD_JSON))

    assert record.meal_name == "Pasta Meal"
    assert record.ingredients == ["Pasta (100g) 200kcal"]
    assert record.calories == 200
    assert record.protein == 7
    assert record.fat == 1
    assert record.carbs == 43
    assert record.vitamin_c == 0
    assert record.health_score == "6/10"
    assert record.ingredient_macros[0].name == "Pasta"
    assert record.ingredient_macros[0].amount == "100g"


def test_normalize_is_idempotent() -> None:
    first = FormatNormalizer().normalize(ResponseParser().parse(FOOD_ANALYSIS_TEXT))

    second = _normalize(first.model_dump())

    assert second == first


def test_food_analysis_text_scenario() -> None:
    record = FormatNormalizer().normalize(ResponseParser().parse(FOOD_ANALYSIS_TEXT))

    assert record.meal_name == "Grilled Chicken"
    assert record.ingredients == ["chicken (100g) 165kcal", "rice (100g) 130kcal"]
    assert record.calories == 350
    assert record.health_score == "3/10"
    assert record.ingredient_macros[1].vitamins["folate"].unit == "mcg"
    _assert_well_formed(record)


def test_default_record_scenario() -> None:
    record = FormatNormalizer().normalize(ResponseParser().parse("I cannot analyze this image."))

    assert record.meal_name == "Mixed Meal"
    assert record.ingredients == ["Mixed ingredients (100g) 200kcal"]
    assert record.health_score == "6/10"
    assert record.ingredient_macros[0].minerals["iron"].amount == 1.2
    _assert_well_formed(record)


def test_default_record_with_callable_preset() -> None:
    parser = ResponseParser(defaults=CALLABLE_DEFAULTS)
    normalizer = FormatNormalizer(defaults=CALLABLE_DEFAULTS)

    record = normalizer.normalize(parser.parse("I cannot analyze this image."))

    assert record.health_score == "5/10"
    assert record.protein == 15


def test_ingredient_macros_are_padded_and_truncated() -> None:
    padded = _normalize(
        {
            "meal_name": "Plate",
            "ingredients": ["Rice (100g) 130kcal", "Beans (80g) 90kcal"],
            "ingredient_macros": [{"protein": 2.7, "fat": 0.3, "carbs": 28}],
        }
    )
    truncated = _normalize(
        {
            "meal_name": "Plate",
            "ingredients": ["Rice (100g) 130kcal"],
            "ingredient_macros": [{"protein": 1}, {"protein": 2}, {"protein": 3}],
        }
    )

    assert len(padded.ingredient_macros) == 2
    assert padded.ingredient_macros[1].protein == 0
    assert padded.ingredient_macros[1].calories == 90
    assert len(truncated.ingredient_macros) == 1
    assert truncated.ingredient_macros[0].protein == 1


def test_missing_totals_are_summed_from_ingredients() -> None:
    record = _normalize(
        {
            "meal_name": "Plate",
            "ingredients": ["Rice (100g) 130kcal", "Beans (80g) 90kcal"],
            "ingredient_macros": [{"protein": 2.7}, {"protein": 6.1}],
        }
    )

    assert record.calories == 220
    assert record.protein == 8.8


def test_string_values_are_coerced_at_ingestion() -> None:
    record = _normalize(
        {
            "meal_name": "Salad",
            "ingredients": ["Lettuce (50g) 25kcal"],
            "calories": "25 kcal",
            "protein": "1.2g",
            "vitamins": {"Vitamin C": "9.2 mg", "D": "2 mcg"},
            "minerals": {"Iron": "0.9mg"},
            "fiber": "1.3g",
        }
    )

    assert record.calories == 25
    assert record.protein == 1.2
    assert record.vitamins["vitamin_c"].amount == 9.2
    assert record.vitamins["vitamin_d"].model_dump() == {"amount": 80.0, "unit": "IU"}
    assert record.minerals["iron"].unit == "mg"
    assert record.other_nutrients["fiber"].amount == 1.3
    assert record.vitamin_c == 9.2


def test_top_level_maps_are_backfilled_from_ingredients() -> None:
    record = _normalize(
        {
            "meal_name": "Bowl",
            "ingredients": ["Rice (100g) 130kcal", "Spinach (30g) 7kcal"],
            "ingredient_macros": [
                {"minerals": {"iron": 0.4}},
                {"minerals": {"iron": 0.8, "calcium": 30}},
            ],
            "minerals": {"calcium": 35},
        }
    )

    assert record.minerals["iron"].amount == 1.2
    assert record.minerals["calcium"].amount == 35


def test_missing_health_score_uses_keywords() -> None:
    record = _normalize(
        {
            "meal_name": "Lunch",
            "ingredients": ["Broccoli (80g) 28kcal", "Salmon (120g) 250kcal"],
        }
    )

    assert record.health_score == "7/10"


def test_legacy_meal_array_is_reshaped() -> None:
    record = _normalize(
        {
            "meal": [
                {
                    "dish": "Chicken Salad",
                    "ingredients": ["chicken", "lettuce (60g)"],
                    "calories": 300,
                    "macronutrients": {"protein": 35, "fat": 12, "carbohydrates": 8},
                    "vitamins": {"c": 15},
                }
            ]
        }
    )

    assert record.meal_name == "Chicken Salad"
    assert record.ingredients == ["chicken (100g) 165kcal", "lettuce (60g) 25kcal"]
    assert record.calories == 300
    assert record.protein == 35
    assert record.carbs == 8
    # 165 kcal split 60/40 protein/fat
    assert record.ingredient_macros[0].protein == pytest.approx(24.75, abs=0.06)
    assert record.ingredient_macros[0].fat == 7.3
    assert record.ingredient_macros[0].vitamins["vitamin_c"].amount == 15
    assert record.vitamin_c == 15


def test_wrapped_text_payload_is_extracted() -> None:
    record = _normalize({"text": FOOD_ANALYSIS_TEXT})

    assert record.meal_name == "Grilled Chicken"
    assert len(record.ingredients) == 2


def test_flat_payload_gets_defaults() -> None:
    record = _normalize({"name": "Banana", "calories": 105, "protein": 1.3})

    assert record.meal_name == "Banana"
    assert record.ingredients == ["Mixed ingredients (100g) 200kcal"]
    assert record.calories == 105
    assert record.protein == 1.3
    assert record.fat == 15
    assert record.vitamin_c == 2


def test_unknown_shape_keeps_micronutrients() -> None:
    record = _normalize({"vitamins": {"vitamin_c": 30}, "foo": "bar"})

    assert record.meal_name == "Mixed Meal"
    assert record.vitamins["vitamin_c"].amount == 30
    assert record.ingredient_macros[0].vitamins["vitamin_c"].amount == 30


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"meal_name": "X"},
        {"meal_name": "X", "ingredients": "not a list", "ingredient_macros": {"a": 1}},
        {"meal_name": "X", "ingredients": [None, 5, {"name": "Egg"}], "health_score": 99},
        {"meal": [{"ingredients": []}]},
        {"meal": []},
        {"calories": "lots"},
        {"meal_name": 12, "calories": float("nan"), "health_score": "bad"},
        {"text": "nothing useful"},
        {"meal_name": "X", "ingredients": [], "calories": 10**400},
        {"meal_name": "X", "health_score": "9" * 400 + "/10", "protein": "9" * 400},
        {
            "meal_name": "X",
            "ingredients": ["A (1g) " + "9" * 305 + "kcal", "B (1g) " + "9" * 305 + "kcal"],
            "ingredient_macros": [
                {"minerals": {"iron": 1.7e308}},
                {"minerals": {"iron": 1.7e308}},
            ],
        },
        {"meal": [{"ingredients": ["Toast " + "9" * 400 + "kcal"], "calories": 10**400}]},
        {"name": "Y", "calories": 5, "vitamin_c": 10**400},
    ],
)
def test_normalize_always_returns_valid_record(payload: dict[str, object]) -> None:
    _assert_well_formed(_normalize(payload))


@pytest.mark.parametrize(
    "raw",
    [
        "FOOD ANALYSIS RESULTS\nFood item 1: Soup\nProtein: " + "9" * 400,
        "FOOD ANALYSIS RESULTS\nProtein: " + "9" * 400 + "\nFat: " + "9" * 400,
        "Calories: 1" + "0" * 308 + "\nCalories: 1" + "0" * 308 + "\nFood item 1: Stew",
        '{"meal_name": "X", "calories": ' + "9" * 400 + ', "health_score": 1e400}',
    ],
)
def test_pipeline_handles_numbers_beyond_float_range(raw: str) -> None:
    record = FormatNormalizer().normalize(ResponseParser().parse(raw))

    _assert_well_formed(record)
