"""Nutrition record models returned to the client."""

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field


class NutrientCategory(str, Enum):
    """Category a nutrient key belongs to."""

    VITAMIN = "vitamin"
    MINERAL = "mineral"
    OTHER = "other"


class NutrientEntry(BaseModel):
    """Canonical nutrient amount with a unit derived from its key."""

    amount: float
    unit: str


NutrientMap = dict[str, NutrientEntry]


class IngredientMacro(BaseModel):
    """Per-ingredient macro and micronutrient breakdown."""

    name: str | None = None
    amount: str | None = None
    calories: float | None = None
    protein: float = 0.0
    fat: float = 0.0
    carbs: float = 0.0
    vitamins: NutrientMap = Field(default_factory=dict)
    minerals: NutrientMap = Field(default_factory=dict)
    other_nutrients: NutrientMap = Field(default_factory=dict)


class NutritionRecord(BaseModel):
    """Canonical meal record."""

    meal_name: str
    ingredients: list[str]
    ingredient_macros: list[IngredientMacro]
    calories: float
    protein: float
    fat: float
    carbs: float
    vitamin_c: float | None = None
    health_score: str = Field(pattern=r"^\d{1,2}/10$")
    vitamins: NutrientMap = Field(default_factory=dict)
    minerals: NutrientMap = Field(default_factory=dict)
    other_nutrients: NutrientMap = Field(default_factory=dict)


class CandidateSource(str, Enum):
    """Parser stage that produced a candidate."""

    JSON = "json"
    EXTRACTED_JSON = "extracted_json"
    TEXT = "text"
    DEFAULT = "default"


@dataclass(frozen=True)
class ParsedCandidate:
    """Untyped model output recovered by the response parser."""

    source: CandidateSource
    payload: dict[str, object] = field(default_factory=dict)
