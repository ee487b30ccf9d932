"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from food_relay.adapters.openai_chat_client import OpenAIChatClient
from food_relay.config import Settings
from food_relay.domain.heuristics import CALLABLE_DEFAULTS, IMAGE_ANALYSIS_DEFAULTS
from food_relay.services.analysis import FoodAnalysisService, NutritionRelayService
from food_relay.services.chat import ChatService
from food_relay.services.completions import ChatCompletionClient
from food_relay.services.normalizer import FormatNormalizer
from food_relay.services.parser import ResponseParser
from food_relay.services.rate_limit import InMemoryRateLimiter, RateLimiter


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    chat_client: ChatCompletionClient
    food_analysis_service: FoodAnalysisService
    text_analysis_service: FoodAnalysisService
    nutrition_service: NutritionRelayService
    chat_service: ChatService
    rate_limiter: RateLimiter
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    # An empty key still builds the client; requests are refused before any call.
    chat_client = OpenAIChatClient.create(
        api_key=resolved_settings.openai_api_key or "",
        base_url=resolved_settings.openai_base_url,
    )
    return wire_container(resolved_settings, chat_client)


def wire_container(settings: Settings, chat_client: ChatCompletionClient) -> AppContainer:
    """Assemble services around an existing chat client."""
    food_analysis_service = FoodAnalysisService(
        client=chat_client,
        model=settings.openai_model,
        max_tokens=settings.openai_max_tokens,
        parser=ResponseParser(defaults=IMAGE_ANALYSIS_DEFAULTS),
        normalizer=FormatNormalizer(defaults=IMAGE_ANALYSIS_DEFAULTS),
    )
    text_analysis_service = FoodAnalysisService(
        client=chat_client,
        model=settings.openai_text_model,
        max_tokens=settings.openai_max_tokens,
        parser=ResponseParser(defaults=CALLABLE_DEFAULTS),
        normalizer=FormatNormalizer(defaults=CALLABLE_DEFAULTS),
    )
    nutrition_service = NutritionRelayService(
        client=chat_client,
        model=settings.openai_text_model,
        max_tokens=settings.openai_max_tokens,
    )
    chat_service = ChatService(client=chat_client, model=settings.openai_text_model)

    async def close_resources() -> None:
        await chat_client.close()

    return AppContainer(
        settings=settings,
        chat_client=chat_client,
        food_analysis_service=food_analysis_service,
        text_analysis_service=text_analysis_service,
        nutrition_service=nutrition_service,
        chat_service=chat_service,
        rate_limiter=InMemoryRateLimiter(max_requests=settings.rate_limit),
        close_resources=close_resources,
    )
