"""Relay services that call the model and shape its output."""

import logging
from dataclasses import dataclass, field

from food_relay.domain.errors import RelayError
from food_relay.domain.nutrition import NutritionRecord
from food_relay.services.completions import ChatCompletionClient
from food_relay.services.food_data import normalize_food_payload
from food_relay.services.normalizer import FormatNormalizer
from food_relay.services.parser import (
    ResponseParser,
    extract_json_object,
    load_json_object,
)
from food_relay.services.prompts import (
    FIX_FOOD_SYSTEM_PROMPT,
    IMAGE_SYSTEM_PROMPT,
    IMAGE_USER_PROMPT,
    NUTRITION_SYSTEM_PROMPT,
    build_description_prompt,
    build_modification_prompt,
    build_nutrition_prompt,
)

JSON_PARSE_ERROR = "Error parsing JSON from response"

_logger = logging.getLogger(__name__)


def as_image_data_url(image: str) -> str:
    """Accept a data URL as-is or wrap bare base64 as JPEG."""
    cleaned = image.strip()
    if cleaned.startswith("data:"):
        return cleaned
    return f"data:image/jpeg;base64,{cleaned}"


@dataclass
class FoodAnalysisService:
    """Analyzes a food photo into a canonical nutrition record."""

    client: ChatCompletionClient
    model: str
    max_tokens: int
    parser: ResponseParser = field(default_factory=ResponseParser)
    normalizer: FormatNormalizer = field(default_factory=FormatNormalizer)

    async def analyze_image(self, image: str) -> NutritionRecord:
        """Send the image once; parsing failures degrade to a default record."""
        messages: list[dict[str, object]] = [
            {"role": "system", "content": IMAGE_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": IMAGE_USER_PROMPT},
                    {
                        "type": "image_url",
                        "image_url": {"url": as_image_data_url(image), "detail": "high"},
                    },
                ],
            },
        ]
        content = await self.client.complete(
            model=self.model,
            messages=messages,
            max_tokens=self.max_tokens,
            temperature=0.1,
            json_mode=True,
        )
        _logger.info("Image analysis content: %s", content[:100])
        return self.record_from_text(content)

    async def analyze_description(self, description: str) -> NutritionRecord:
        """Same pipeline for a free-text meal description."""
        content = await self.client.complete(
            model=self.model,
            messages=[
                {"role": "system", "content": IMAGE_SYSTEM_PROMPT},
                {"role": "user", "content": build_description_prompt(description)},
            ],
            max_tokens=self.max_tokens,
            temperature=0.1,
            json_mode=True,
        )
        _logger.info("Description analysis content: %s", content[:100])
        return self.record_from_text(content)

    def record_from_text(self, content: str) -> NutritionRecord:
        return self.normalizer.normalize(self.parser.parse(content))


@dataclass
class NutritionRelayService:
    """Text nutrition lookups and food modifications."""

    client: ChatCompletionClient
    model: str
    max_tokens: int

    async def calculate(  # noqa: PLR0913
        self,
        food_name: str,
        serving_size: str | None = None,
        query: str | None = None,
        operation_type: str | None = None,
        instructions: str | None = None,
        current_data: dict[str, object] | None = None,
    ) -> dict[str, object]:
        """Nutrition for a named food, or a modification of `current_data`."""
        if current_data or instructions:
            prompt = build_modification_prompt(
                food_name, current_data, instructions or query, operation_type
            )
        else:
            prompt = build_nutrition_prompt(food_name, serving_size, query)
        return await self._request_json(NUTRITION_SYSTEM_PROMPT, prompt, 0.2)

    async def fix_food(
        self,
        query: str | None = None,
        instructions: str | None = None,
        operation_type: str | None = None,
        food_data: dict[str, object] | None = None,
    ) -> dict[str, object]:
        """Ask the model to correct or adjust an existing food entry."""
        if food_data:
            prompt = build_modification_prompt(
                None, food_data, instructions or query, operation_type
            )
        else:
            prompt = query or instructions or ""
        return await self._request_json(FIX_FOOD_SYSTEM_PROMPT, prompt, 0.3)

    async def _request_json(
        self, system_prompt: str, prompt: str, temperature: float
    ) -> dict[str, object]:
        content = await self.client.complete(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            max_tokens=self.max_tokens,
            temperature=temperature,
            json_mode=True,
        )
        payload = load_json_object(content)
        if payload is None:
            payload = extract_json_object(content)
        if payload is None:
            _logger.error("No JSON object in model content: %s", content[:100])
            raise RelayError(500, JSON_PARSE_ERROR, raw_content=content)
        return normalize_food_payload(payload)
