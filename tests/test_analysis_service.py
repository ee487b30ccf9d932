"""Tests for the model-backed relay services."""

import asyncio

import pytest

from food_relay.domain.errors import RelayError
from food_relay.services.analysis import (
    FoodAnalysisService,
    NutritionRelayService,
    as_image_data_url,
)
from tests.conftest import FOOD_ANALYSIS_TEXT, FakeChatClient


def test_as_image_data_url() -> None:
    assert as_image_data_url("data:image/png;base64,AAA") == "data:image/png;base64,AAA"
    assert as_image_data_url(" QUJD ") == "data:image/jpeg;base64,QUJD"


def test_analyze_image_sends_one_json_request() -> None:
    client = FakeChatClient()
    service = FoodAnalysisService(client=client, model="gpt-4o", max_tokens=1500)

    record = asyncio.run(service.analyze_image("data:image/jpeg;base64,ZmFrZQ=="))

    assert record.meal_name == "Pasta Meal"
    assert len(client.calls) == 1
    call = client.calls[0]
    assert call["json_mode"] is True
    assert call["model"] == "gpt-4o"
    user_content = call["messages"][1]["content"]
    assert user_content[1]["image_url"]["url"] == "data:image/jpeg;base64,ZmFrZQ=="


def test_analyze_image_degrades_on_free_text() -> None:
    service = FoodAnalysisService(
        client=FakeChatClient(replies=[FOOD_ANALYSIS_TEXT]), model="gpt-4o", max_tokens=1500
    )

    record = asyncio.run(service.analyze_image("ZmFrZQ=="))

    assert record.meal_name == "Grilled Chicken"
    assert record.calories == 350


def test_analyze_description_uses_text_prompt() -> None:
    client = FakeChatClient(replies=["Sorry, no idea."])
    service = FoodAnalysisService(client=client, model="gpt-4o-mini", max_tokens=800)

    record = asyncio.run(service.analyze_description("a bowl of ramen"))

    assert record.meal_name == "Mixed Meal"
    assert "a bowl of ramen" in client.calls[0]["messages"][1]["content"]


def test_calculate_returns_normalized_payload() -> None:
    client = FakeChatClient(replies=['{"calories": 150, "protein": 5, "cholesterol": 0}'])
    service = NutritionRelayService(client=client, model="gpt-4o-mini", max_tokens=1000)

    data = asyncio.run(service.calculate("Oatmeal", serving_size="1 cup"))

    assert data["calories"] == 150
    assert data["other_nutrients"]["cholesterol"] == {"amount": 0.0, "unit": "mg"}
    assert "Serving size: 1 cup" in client.calls[0]["messages"][1]["content"]


def test_calculate_with_current_data_uses_modification_prompt() -> None:
    client = FakeChatClient(replies=['```json\n{"name": "Lighter Toast", "calories": 90}\n```'])
    service = NutritionRelayService(client=client, model="gpt-4o-mini", max_tokens=1000)

    data = asyncio.run(
        service.calculate(
            "Toast", instructions="halve the butter", current_data={"calories": 150}
        )
    )

    assert data["name"] == "Lighter Toast"
    prompt = client.calls[0]["messages"][1]["content"]
    assert "Instruction: halve the butter" in prompt
    assert "Total calories: 150" in prompt


def test_calculate_raises_with_raw_content_when_no_json() -> None:
    service = NutritionRelayService(
        client=FakeChatClient(replies=["I am not sure."]), model="gpt-4o-mini", max_tokens=1000
    )

    with pytest.raises(RelayError) as exc_info:
        asyncio.run(service.calculate("Mystery"))

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Error parsing JSON from response"
    assert exc_info.value.raw_content == "I am not sure."


def test_fix_food_with_query_only() -> None:
    client = FakeChatClient(replies=['{"name": "Salad", "calories": 120}'])
    service = NutritionRelayService(client=client, model="gpt-4o-mini", max_tokens=1000)

    data = asyncio.run(service.fix_food(query="caesar salad without croutons"))

    assert data["name"] == "Salad"
    assert client.calls[0]["messages"][1]["content"] == "caesar salad without croutons"
    assert client.calls[0]["temperature"] == 0.3
