"""Conversational relay with simulated streaming."""

import logging
import random
from dataclasses import dataclass, field

from food_relay.services.completions import ChatCompletionClient

MIN_CHUNK_WORDS = 3
MAX_CHUNK_WORDS = 5

_logger = logging.getLogger(__name__)


@dataclass
class ChatService:
    """Forwards a message list once and returns the reply."""

    client: ChatCompletionClient
    model: str
    max_tokens: int = 2000
    temperature: float = 0.7
    rng: random.Random = field(default_factory=random.Random)

    async def reply(self, messages: list[dict[str, object]]) -> str:
        """Return the full assistant reply."""
        content = await self.client.complete(
            model=self.model,
            messages=messages,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        _logger.info("Chat reply: %s", content[:100])
        return content

    async def reply_in_chunks(
        self, messages: list[dict[str, object]]
    ) -> tuple[list[str], str]:
        """Return the reply split into word chunks, plus the full text."""
        content = await self.reply(messages)
        return chunk_text(content, self.rng), content


def chunk_text(content: str, rng: random.Random) -> list[str]:
    """Split text into consecutive chunks of 3-5 words.

    Chunks never overlap and never skip words: joining them yields the
    original text exactly. Each chunk except the last keeps its trailing
    separator.
    """
    if not content:
        return []
    words = content.split(" ")
    chunks: list[str] = []
    index = 0
    while index < len(words):
        end = min(index + rng.randint(MIN_CHUNK_WORDS, MAX_CHUNK_WORDS), len(words))
        chunk = " ".join(words[index:end])
        if end < len(words):
            chunk += " "
        chunks.append(chunk)
        index = end
    return chunks
