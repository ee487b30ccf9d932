"""Best-effort recovery of structured data from model output."""

import json
import logging
import math
import re
from dataclasses import dataclass, field

from food_relay.domain.health_score import format_score, macro_health_score
from food_relay.domain.heuristics import (
    IMAGE_ANALYSIS_DEFAULTS,
    DefaultRecordProfile,
    HeuristicProfile,
)
from food_relay.domain.ingredients import format_ingredient_label, parse_ingredient_label
from food_relay.domain.nutrients import finite_float
from food_relay.domain.nutrition import CandidateSource, ParsedCandidate

TEXT_SENTINELS = ("Food item", "FOOD ANALYSIS RESULTS")

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
_BRACE_PATTERN = re.compile(r"\{[\s\S]*\}")
_LEADING_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
_VITAMIN_MENTION = re.compile(r"vitamin ([a-z0-9]+)\s*:\s*(\d+(?:\.\d+)?)", re.IGNORECASE)
_MINERAL_MENTION = re.compile(
    r"\b(iron|calcium|zinc|magnesium|potassium|sodium)\s*:\s*(\d+(?:\.\d+)?)",
    re.IGNORECASE,
)
_TOTAL_PREFIXES = {
    "Calories:": "calories",
    "Protein:": "protein",
    "Fat:": "fat",
    "Carbs:": "carbs",
    "Vitamin C:": "vitamin_c",
}

_logger = logging.getLogger(__name__)


@dataclass
class ResponseParser:
    """Turns raw model text into a candidate payload; never raises."""

    defaults: DefaultRecordProfile = IMAGE_ANALYSIS_DEFAULTS
    heuristics: HeuristicProfile = field(default_factory=HeuristicProfile)

    def parse(self, raw_text: str) -> ParsedCandidate:
        """Try direct JSON, embedded JSON, line extraction, then defaults."""
        text = raw_text or ""
        payload = load_json_object(text)
        if payload is not None:
            _logger.info("Parsed model output as JSON")
            return ParsedCandidate(CandidateSource.JSON, payload)

        payload = extract_json_object(text)
        if payload is not None:
            _logger.info("Extracted JSON object from model output")
            return ParsedCandidate(CandidateSource.EXTRACTED_JSON, payload)

        if has_text_sentinel(text):
            _logger.info("Falling back to line-oriented extraction")
            return ParsedCandidate(
                CandidateSource.TEXT,
                extract_text_record(text, self.heuristics, self.defaults),
            )

        _logger.warning("No structure found in model output, using default record")
        return ParsedCandidate(
            CandidateSource.DEFAULT,
            default_record_payload(self.defaults),
        )


def load_json_object(text: str) -> dict[str, object] | None:
    """Parse text as a JSON object, or return None."""
    try:
        value = json.loads(text)
    except (ValueError, RecursionError):
        return None
    if isinstance(value, dict):
        return value
    return None


def extract_json_object(text: str) -> dict[str, object] | None:
    """Find a fenced or brace-delimited JSON object inside free text."""
    fence = _FENCE_PATTERN.search(text)
    if fence:
        payload = load_json_object(fence.group(1).strip())
        if payload is not None:
            return payload
    braces = _BRACE_PATTERN.search(text)
    if braces:
        return load_json_object(braces.group(0).replace("```", "").strip())
    return None


def has_text_sentinel(text: str) -> bool:
    return any(sentinel in text for sentinel in TEXT_SENTINELS)


def extract_text_record(
    text: str,
    heuristics: HeuristicProfile,
    defaults: DefaultRecordProfile,
) -> dict[str, object]:
    """Read a `FOOD ANALYSIS RESULTS` style report into a record payload."""
    vitamins = _mentions(_VITAMIN_MENTION, text, prefix="vitamin_")
    minerals = _mentions(_MINERAL_MENTION, text)
    lines = text.split("\n")

    meal_name = defaults.meal_name
    for line in lines:
        if "Food item 1:" in line:
            meal_name = line.replace("Food item 1:", "").strip() or defaults.meal_name
            break

    ingredients: list[str] = []
    ingredient_macros: list[dict[str, object]] = []
    totals = dict.fromkeys(_TOTAL_PREFIXES.values(), 0.0)
    for raw_line in lines:
        line = raw_line.strip()
        if line.startswith("Ingredients:"):
            for part in line.removeprefix("Ingredients:").split(","):
                label = part.strip()
                if not label:
                    continue
                name, weight, calories = parse_ingredient_label(label)
                estimate = heuristics.estimate_for(name)
                weight = weight or estimate.weight
                calories = estimate.calories if calories is None else calories
                ingredients.append(format_ingredient_label(name, weight, calories))
                ingredient_macros.append(
                    {
                        "name": name,
                        "amount": weight,
                        "calories": calories,
                        "protein": estimate.protein,
                        "fat": estimate.fat,
                        "carbs": estimate.carbs,
                        "vitamins": dict(estimate.vitamins or vitamins),
                        "minerals": dict(estimate.minerals or minerals),
                    }
                )
            continue
        for prefix, key in _TOTAL_PREFIXES.items():
            if line.startswith(prefix):
                match = _LEADING_NUMBER.search(line.removeprefix(prefix))
                number = finite_float(match.group(0)) if match else None
                if number is not None and math.isfinite(totals[key] + number):
                    totals[key] += number

    if not ingredients:
        placeholder = default_record_payload(defaults, vitamins, minerals)
        ingredients = list(placeholder["ingredients"])
        ingredient_macros = list(placeholder["ingredient_macros"])

    calories = totals["calories"] or defaults.calories
    protein = totals["protein"] or defaults.protein
    fat = totals["fat"] or defaults.fat
    carbs = totals["carbs"] or defaults.carbs
    vitamin_c = totals["vitamin_c"] or defaults.vitamin_c
    score = macro_health_score(protein, vitamin_c, fat, calories)
    return {
        "meal_name": meal_name,
        "ingredients": ingredients,
        "ingredient_macros": ingredient_macros,
        "calories": calories,
        "protein": protein,
        "fat": fat,
        "carbs": carbs,
        "vitamin_c": vitamin_c,
        "health_score": format_score(score),
        "vitamins": vitamins,
        "minerals": minerals,
    }


def _mentions(pattern: re.Pattern[str], text: str, prefix: str = "") -> dict[str, float]:
    found: dict[str, float] = {}
    for name, value in pattern.findall(text):
        number = finite_float(value)
        if number is not None:
            found[f"{prefix}{name.lower()}"] = number
    return found


def default_record_payload(
    defaults: DefaultRecordProfile,
    vitamins: dict[str, object] | None = None,
    minerals: dict[str, object] | None = None,
) -> dict[str, object]:
    """Build the placeholder record, keeping any recovered micronutrients."""
    top_vitamins = dict(vitamins) if isinstance(vitamins, dict) else {}
    top_minerals = dict(minerals) if isinstance(minerals, dict) else {}
    return {
        "meal_name": defaults.meal_name,
        "ingredients": [defaults.ingredient],
        "ingredient_macros": [
            {
                "protein": defaults.ingredient_protein,
                "fat": defaults.ingredient_fat,
                "carbs": defaults.ingredient_carbs,
                "vitamins": dict(top_vitamins or defaults.ingredient_vitamins),
                "minerals": dict(top_minerals or defaults.ingredient_minerals),
            }
        ],
        "calories": defaults.calories,
        "protein": defaults.protein,
        "fat": defaults.fat,
        "carbs": defaults.carbs,
        "vitamin_c": defaults.vitamin_c,
        "health_score": defaults.health_score,
        "vitamins": top_vitamins,
        "minerals": top_minerals,
    }
