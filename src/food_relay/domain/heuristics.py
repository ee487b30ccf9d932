"""Static ingredient estimates used when the model omits numbers."""

from collections.abc import Mapping
from dataclasses import dataclass, field

PROTEIN_KCAL_PER_G = 4.0
CARBS_KCAL_PER_G = 4.0
FAT_KCAL_PER_G = 9.0


@dataclass(frozen=True)
class IngredientEstimate:
    """Fallback weight, energy and macros for one ingredient family."""

    keywords: tuple[str, ...]
    weight: str
    calories: float
    protein: float
    fat: float
    carbs: float
    vitamins: Mapping[str, float] = field(default_factory=dict)
    minerals: Mapping[str, float] = field(default_factory=dict)

    def matches(self, name: str) -> bool:
        """Return True when any keyword occurs in the lowercased name."""
        lowered = name.lower()
        return any(keyword in lowered for keyword in self.keywords)


@dataclass(frozen=True)
class MacroShare:
    """Share of an ingredient's calories coming from each macro."""

    keywords: tuple[str, ...]
    protein: float
    fat: float
    carbs: float

    def matches(self, name: str) -> bool:
        """Return True when any keyword occurs in the lowercased name."""
        lowered = name.lower()
        return any(keyword in lowered for keyword in self.keywords)


# Order matters: specific foods come before the broader families they contain.
INGREDIENT_ESTIMATES: tuple[IngredientEstimate, ...] = (
    IngredientEstimate(
        keywords=("watermelon",),
        weight="100g",
        calories=30,
        protein=0.6,
        fat=0.2,
        carbs=7.6,
        vitamins={"vitamin_a": 569, "vitamin_c": 8.1, "vitamin_b6": 0.045, "vitamin_b1": 0.033},
        minerals={"potassium": 112, "magnesium": 10, "phosphorus": 11, "zinc": 0.1},
    ),
    IngredientEstimate(
        keywords=("pineapple",),
        weight="100g",
        calories=50,
        protein=0.5,
        fat=0.1,
        carbs=13.1,
        vitamins={"vitamin_c": 47.8, "vitamin_b1": 0.079, "vitamin_b6": 0.112, "folate": 18},
        minerals={"manganese": 0.927, "copper": 110, "potassium": 109, "magnesium": 12},
    ),
    IngredientEstimate(
        keywords=("pasta", "noodle"),
        weight="100g",
        calories=200,
        protein=7.5,
        fat=1.1,
        carbs=43.2,
        vitamins={
            "vitamin_b1": 0.2,
            "vitamin_b2": 0.1,
            "vitamin_b3": 1.7,
            "vitamin_b6": 0.1,
            "folate": 18,
        },
        minerals={
            "iron": 1.8,
            "magnesium": 53,
            "phosphorus": 189,
            "zinc": 1.3,
            "selenium": 63.2,
            "potassium": 223,
        },
    ),
    IngredientEstimate(
        keywords=("rice",),
        weight="100g",
        calories=130,
        protein=2.7,
        fat=0.3,
        carbs=28.2,
        vitamins={"vitamin_b1": 0.1, "vitamin_b3": 1.6, "vitamin_b6": 0.15, "folate": 8},
        minerals={
            "iron": 0.4,
            "magnesium": 25,
            "phosphorus": 115,
            "zinc": 1.2,
            "selenium": 15.1,
            "potassium": 115,
        },
    ),
    IngredientEstimate(("bread", "toast"), "60g", 150, 5.4, 1.8, 28.2),
    IngredientEstimate(("potato",), "100g", 80, 2.0, 0.1, 17.0),
    IngredientEstimate(("salad", "lettuce"), "50g", 25, 1.2, 0.2, 3.0),
    IngredientEstimate(("tomato",), "100g", 18, 0.9, 0.2, 3.9),
    IngredientEstimate(("cheese",), "30g", 120, 7.8, 9.9, 0.4),
    IngredientEstimate(("milk",), "100ml", 42, 3.4, 1.0, 5.0),
    IngredientEstimate(("egg",), "50g", 78, 6.3, 5.3, 0.6),
    IngredientEstimate(("chicken", "poultry"), "100g", 165, 31.0, 3.6, 0.0),
    IngredientEstimate(("beef", "steak"), "100g", 250, 26.0, 17.0, 0.0),
    IngredientEstimate(("pork",), "100g", 242, 29.0, 14.0, 0.0),
    IngredientEstimate(("fish", "salmon"), "100g", 206, 22.0, 13.0, 0.0),
    IngredientEstimate(("meat", "salami"), "85g", 250, 25.0, 15.0, 0.0),
    IngredientEstimate(("oil", "butter"), "15g", 135, 0.0, 15.0, 0.0),
    IngredientEstimate(("sugar", "sweetener"), "10g", 40, 0.0, 0.0, 10.0),
    IngredientEstimate(("fruit", "apple", "banana"), "100g", 60, 0.7, 0.3, 14.0),
    IngredientEstimate(("chocolate", "candy"), "25g", 130, 1.5, 8.0, 14.0),
    IngredientEstimate(("nut", "peanut", "almond"), "30g", 180, 6.0, 16.0, 5.0),
)

DEFAULT_ESTIMATE = IngredientEstimate((), "30g", 75, 3.0, 2.0, 10.0)

MACRO_SHARES: tuple[MacroShare, ...] = (
    MacroShare(("chicken", "beef", "fish", "meat"), protein=0.6, fat=0.4, carbs=0.0),
    MacroShare(("cheese", "avocado", "nut", "oil"), protein=0.1, fat=0.8, carbs=0.1),
    MacroShare(("rice", "pasta", "bread", "potato"), protein=0.1, fat=0.05, carbs=0.85),
    MacroShare(("vegetable", "broccoli", "spinach"), protein=0.3, fat=0.0, carbs=0.7),
    MacroShare(("fruit", "apple", "banana"), protein=0.05, fat=0.05, carbs=0.9),
)

DEFAULT_SHARE = MacroShare((), protein=0.2, fat=0.3, carbs=0.5)


def split_calories(calories: float, share: MacroShare) -> tuple[float, float, float]:
    """Split an energy estimate into protein, fat and carb grams."""
    protein = round(calories * share.protein / PROTEIN_KCAL_PER_G, 1)
    fat = round(calories * share.fat / FAT_KCAL_PER_G, 1)
    carbs = round(calories * share.carbs / CARBS_KCAL_PER_G, 1)
    return protein, fat, carbs


@dataclass(frozen=True)
class HeuristicProfile:
    """Lookup strategy over the estimate and macro-share tables."""

    estimates: tuple[IngredientEstimate, ...] = INGREDIENT_ESTIMATES
    shares: tuple[MacroShare, ...] = MACRO_SHARES
    default_estimate: IngredientEstimate = DEFAULT_ESTIMATE
    default_share: MacroShare = DEFAULT_SHARE

    def estimate_for(self, name: str) -> IngredientEstimate:
        """Return the first estimate whose keywords match the name."""
        for estimate in self.estimates:
            if estimate.matches(name):
                return estimate
        return self.default_estimate

    def share_for(self, name: str) -> MacroShare:
        """Return the first macro share whose keywords match the name."""
        for share in self.shares:
            if share.matches(name):
                return share
        return self.default_share


@dataclass(frozen=True)
class DefaultRecordProfile:
    """Placeholder record emitted when nothing usable can be recovered."""

    meal_name: str = "Mixed Meal"
    ingredient: str = "Mixed ingredients (100g) 200kcal"
    ingredient_protein: float = 10.0
    ingredient_fat: float = 7.0
    ingredient_carbs: float = 30.0
    ingredient_vitamins: Mapping[str, float] = field(
        default_factory=lambda: {
            "vitamin_c": 2.0,
            "vitamin_a": 100,
            "vitamin_b1": 0.1,
            "vitamin_b2": 0.2,
        }
    )
    ingredient_minerals: Mapping[str, float] = field(
        default_factory=lambda: {
            "calcium": 30,
            "iron": 1.2,
            "potassium": 150,
            "magnesium": 20,
        }
    )
    calories: float = 500
    protein: float = 20
    fat: float = 15
    carbs: float = 60
    vitamin_c: float = 2
    health_score: str = "6/10"


IMAGE_ANALYSIS_DEFAULTS = DefaultRecordProfile()

CALLABLE_DEFAULTS = DefaultRecordProfile(protein=15, fat=10, carbs=20, health_score="5/10")
