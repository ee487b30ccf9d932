"""Prompt templates for the nutrition relay routes."""

import json

VITAMIN_FIELDS: dict[str, str] = {
    "vitamin_a": "mcg",
    "vitamin_c": "mg",
    "vitamin_d": "IU",
    "vitamin_e": "mg",
    "vitamin_k": "mcg",
    "vitamin_b1": "mg",
    "vitamin_b2": "mg",
    "vitamin_b3": "mg",
    "vitamin_b5": "mg",
    "vitamin_b6": "mg",
    "vitamin_b7": "mcg",
    "vitamin_b9": "mcg",
    "vitamin_b12": "mcg",
}

MINERAL_FIELDS: dict[str, str] = {
    "calcium": "mg",
    "chloride": "mg",
    "chromium": "mcg",
    "copper": "mcg",
    "fluoride": "mg",
    "iodine": "mcg",
    "iron": "mg",
    "magnesium": "mg",
    "manganese": "mg",
    "molybdenum": "mcg",
    "phosphorus": "mg",
    "potassium": "mg",
    "selenium": "mcg",
    "sodium": "mg",
    "zinc": "mg",
}

OTHER_FIELDS: dict[str, str] = {
    "fiber": "g",
    "cholesterol": "mg",
    "sugar": "g",
    "saturated_fats": "g",
    "omega_3": "mg",
    "omega_6": "g",
}


def _field_lines(fields: dict[str, str]) -> str:
    return "\n".join(f"   - {key}: number in {unit}" for key, unit in fields.items())


IMAGE_SYSTEM_PROMPT = (
    "You are a nutrition expert analyzing food images. "
    "OUTPUT MUST BE VALID JSON AND NOTHING ELSE.\n\n"
    "FORMAT RULES:\n"
    '1. Return a single meal name for the entire image (e.g. "Pasta Meal").\n'
    '2. List ingredients with weights and calories (e.g. "Pasta (100g) 200kcal").\n'
    "3. Return totals for calories, protein, fat and carbs.\n"
    '4. Add a health score as "N/10" (1-10) based on ingredient quality.\n'
    "5. Provide an ingredient_macros entry for EACH ingredient, in the same order, "
    "with protein, fat and carbs in grams and these nested maps:\n"
    "   vitamins:\n"
    f"{_field_lines(VITAMIN_FIELDS)}\n"
    "   minerals:\n"
    f"{_field_lines(MINERAL_FIELDS)}\n"
    "   other_nutrients:\n"
    f"{_field_lines(OTHER_FIELDS)}\n"
    "6. Always name real food ingredients, never generic placeholders.\n"
    "7. Do not wrap the JSON in markdown code blocks.\n\n"
    "EXACT FORMAT REQUIRED:\n"
    "{\n"
    '  "meal_name": "Meal Name",\n'
    '  "ingredients": ["Item1 (weight) Nkcal"],\n'
    '  "ingredient_macros": [{"protein": 0, "fat": 0, "carbs": 0, '
    '"vitamins": {}, "minerals": {}, "other_nutrients": {}}],\n'
    '  "calories": 0,\n'
    '  "protein": 0,\n'
    '  "fat": 0,\n'
    '  "carbs": 0,\n'
    '  "vitamin_c": 0,\n'
    '  "vitamins": {},\n'
    '  "minerals": {},\n'
    '  "other_nutrients": {},\n'
    '  "health_score": "7/10"\n'
    "}"
)

IMAGE_USER_PROMPT = (
    "RETURN ONLY RAW JSON - NO TEXT, NO CODE BLOCKS, NO EXPLANATIONS. "
    "Analyze this food image and return all required nutrients in the exact format."
)

_MICRONUTRIENT_RULES = (
    "Always include values for cholesterol (in mg), omega-3 fatty acids (in mg), "
    "and omega-6 fatty acids (in g) in both the root level and in a nested "
    "'other_nutrients' object with proper units. For eggs and animal products, be "
    "particularly accurate with cholesterol values. For fatty fish, nuts, and plant "
    "oils, be accurate with omega-3 and omega-6 values."
)

NUTRITION_SYSTEM_PROMPT = (
    "You are a specialized nutrition calculator. Analyze food ingredients and "
    "provide accurate nutrition information in valid JSON format. " + _MICRONUTRIENT_RULES
)

FIX_FOOD_SYSTEM_PROMPT = (
    "You are a nutrition expert specialized in analyzing and improving food recipes. "
    "Always respond with valid JSON. " + _MICRONUTRIENT_RULES
)

_OTHER_NUTRIENTS_EXAMPLE = {
    "cholesterol": {"amount": 10, "unit": "mg"},
    "omega_3": {"amount": 150, "unit": "mg"},
    "omega_6": {"amount": 2.5, "unit": "g"},
}

_NUTRITION_EXAMPLE = {
    "calories": 250,
    "protein": 20,
    "fat": 10,
    "carbs": 15,
    "cholesterol": 10,
    "omega_3": 150,
    "omega_6": 2.5,
    "other_nutrients": _OTHER_NUTRIENTS_EXAMPLE,
}

_MODIFIED_FOOD_EXAMPLE = {
    "name": "Updated Food Name",
    "calories": 150,
    "protein": 15,
    "fat": 3,
    "carbs": 8,
    "cholesterol": 10,
    "omega_3": 150,
    "omega_6": 2.5,
    "ingredients": [
        {
            "name": "Ingredient 1",
            "amount": "100g",
            "calories": 100,
            "protein": 10,
            "fat": 2,
            "carbs": 5,
            "cholesterol": 5,
            "omega_3": 50,
            "omega_6": 1.0,
        }
    ],
    "other_nutrients": _OTHER_NUTRIENTS_EXAMPLE,
}


def build_nutrition_prompt(
    food_name: str,
    serving_size: str | None = None,
    query: str | None = None,
) -> str:
    """Prompt for a plain nutrition calculation."""
    lines = ["Calculate accurate nutrition values for the following food:"]
    lines.append(f"Food: {food_name}")
    if serving_size:
        lines.append(f"Serving size: {serving_size}")
    if query:
        lines.append(f"Query: {query}")
    else:
        lines.append(
            "\nPlease always include detailed micronutrient information in your "
            "response, including: cholesterol (in mg), omega-3 fatty acids (in mg), "
            "and omega-6 fatty acids (in g)."
        )
    lines.append("\nPlease provide a valid JSON response with the following structure:")
    lines.append(json.dumps(_NUTRITION_EXAMPLE, indent=2))
    return "\n".join(lines)


def build_modification_prompt(
    food_name: str | None,
    food_data: dict[str, object] | None,
    instruction: str | None,
    operation_type: str | None = None,
) -> str:
    """Prompt asking the model to modify an existing food entry."""
    data = food_data or {}
    lines = ["Analyze and modify the following food based on instructions:", ""]
    lines.append(f"Food: {food_name or data.get('name') or 'Unknown'}")
    for key, label in (
        ("calories", "calories"),
        ("protein", "protein"),
        ("fat", "fat"),
        ("carbs", "carbs"),
        ("cholesterol", "cholesterol"),
        ("omega_3", "omega-3"),
        ("omega_6", "omega-6"),
    ):
        if data.get(key):
            lines.append(f"Total {label}: {data[key]}")

    ingredients = data.get("ingredients")
    if isinstance(ingredients, list) and ingredients:
        lines.append("Ingredients:")
        lines.extend(_ingredient_line(item) for item in ingredients if isinstance(item, dict))

    lines.append("")
    lines.append(f"Instruction: {instruction or 'Analyze and improve this food'}")
    if operation_type:
        lines.append(f"Operation type: {operation_type}")
    lines.append("\nPlease respond with a valid JSON object using this structure:")
    lines.append(json.dumps(_MODIFIED_FOOD_EXAMPLE, indent=2))
    return "\n".join(lines)


def _ingredient_line(ingredient: dict[str, object]) -> str:
    line = (
        f"- {ingredient.get('name', 'Unknown')} ({ingredient.get('amount', '?')}): "
        f"{ingredient.get('calories', 0)} calories, {ingredient.get('protein', 0)}g protein, "
        f"{ingredient.get('fat', 0)}g fat, {ingredient.get('carbs', 0)}g carbs"
    )
    if ingredient.get("cholesterol"):
        line += f", {ingredient['cholesterol']}mg cholesterol"
    if ingredient.get("omega_3"):
        line += f", {ingredient['omega_3']}mg omega-3"
    if ingredient.get("omega_6"):
        line += f", {ingredient['omega_6']}g omega-6"
    return line


def build_description_prompt(description: str) -> str:
    return (
        "RETURN ONLY RAW JSON - NO TEXT, NO CODE BLOCKS, NO EXPLANATIONS. "
        f"Analyze this meal description and return all required nutrients: {description}"
    )
