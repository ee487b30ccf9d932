"""Chat-completion client interface."""

from typing import Protocol


class ChatCompletionClient(Protocol):
    """Interface for a single chat-completion call."""

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        messages: list[dict[str, object]],
        max_tokens: int | None = None,
        temperature: float | None = None,
        json_mode: bool = False,
    ) -> str:
        """Return the content of the first choice."""

    async def close(self) -> None:
        """Release the underlying HTTP session."""
