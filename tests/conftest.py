"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from food_relay.config import Settings
from food_relay.containers import AppContainer, wire_container
from food_relay.services.completions import ChatCompletionClient

PASTA_RECORD_JSON = (
    '{"meal_name":"Pasta Meal","ingredients":["Pasta (100g) 200kcal"],'
    '"calories":200,"protein":7,"fat":1,"carbs":43,"vitamin_c":0,'
    '"health_score":"6/10"}'
)

FOOD_ANALYSIS_TEXT = (
    "FOOD ANALYSIS RESULTS\nFood item 1: Grilled Chicken\nIngredients: chicken, rice\n"
    "Calories: 350\nProtein: 40\nFat: 8\nCarbs: 30\nVitamin C: 0"
)


@dataclass
class FakeChatClient(ChatCompletionClient):
    """Chat client returning scripted replies and recording requests."""

    replies: list[str] = field(default_factory=lambda: [PASTA_RECORD_JSON])
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)
    closed: bool = False

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        messages: list[dict[str, object]],
        max_tokens: int | None = None,
        temperature: float | None = None,
        json_mode: bool = False,
    ) -> str:
        self.calls.append(
            {
                "model": model,
                "messages": messages,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "json_mode": json_mode,
            }
        )
        if self.error is not None:
            raise self.error
        if len(self.replies) > 1:
            return self.replies.pop(0)
        return self.replies[0]

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openai_api_key="openai-key",
        openai_model="gpt-4o",
        openai_text_model="gpt-4o-mini",
        rate_limit=30,
    )


@pytest.fixture
def chat_client() -> FakeChatClient:
    return FakeChatClient()


@pytest.fixture
def container(settings: Settings, chat_client: FakeChatClient) -> AppContainer:
    return wire_container(settings, chat_client)
