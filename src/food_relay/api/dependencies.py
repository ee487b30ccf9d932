"""Request guards shared by the relay routes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import Request

from food_relay.domain.errors import CONFIGURATION_ERROR, RATE_LIMITED, RelayError

if TYPE_CHECKING:
    from food_relay.containers import AppContainer

_logger = logging.getLogger(__name__)


async def enforce_rate_limit(request: Request) -> None:
    """Reject callers that exceed the per-address request budget."""
    container: AppContainer = request.app.state.container
    client_key = request.client.host if request.client else "unknown"
    if not container.rate_limiter.allow(client_key):
        _logger.warning("Rate limit exceeded for %s", client_key)
        raise RelayError(429, RATE_LIMITED)


async def require_api_key(request: Request) -> None:
    """Fail fast when no provider key is configured."""
    container: AppContainer = request.app.state.container
    if not container.settings.openai_api_key:
        _logger.error("OPENAI_API_KEY is not set")
        raise RelayError(500, CONFIGURATION_ERROR)
