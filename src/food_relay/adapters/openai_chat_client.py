"""OpenAI Chat Completions client."""

import logging
from dataclasses import dataclass

import httpx
import openai
from openai import AsyncOpenAI

from food_relay.domain.errors import (
    INVALID_UPSTREAM_RESPONSE,
    SERVER_ERROR,
    RelayError,
    upstream_error,
)
from food_relay.services.completions import ChatCompletionClient

_logger = logging.getLogger(__name__)


@dataclass
class OpenAIChatClient(ChatCompletionClient):
    """Chat client backed by the OpenAI Chat Completions API."""

    client: AsyncOpenAI

    @classmethod
    def create(
        cls,
        api_key: str,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> "OpenAIChatClient":
        """Create a client that makes exactly one attempt per call."""
        return cls(
            client=AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                max_retries=0,
                http_client=http_client,
            )
        )

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        messages: list[dict[str, object]],
        max_tokens: int | None = None,
        temperature: float | None = None,
        json_mode: bool = False,
    ) -> str:
        """Call Chat Completions and return the first choice's content."""
        request_payload: dict[str, object] = {"model": model, "messages": messages}
        if max_tokens is not None:
            request_payload["max_tokens"] = max_tokens
        if temperature is not None:
            request_payload["temperature"] = temperature
        if json_mode:
            request_payload["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(**request_payload)
        except openai.APIStatusError as exc:
            _logger.error("OpenAI API error %s: %s", exc.status_code, exc.body)
            raise upstream_error(exc.status_code) from exc
        except openai.APIError as exc:
            _logger.exception("OpenAI request failed")
            raise RelayError(500, SERVER_ERROR) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            _logger.error("OpenAI returned no content")
            raise RelayError(500, INVALID_UPSTREAM_RESPONSE)
        return content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
