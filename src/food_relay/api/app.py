"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from food_relay.api.dependencies import enforce_rate_limit, require_api_key
from food_relay.api.models import (
    AnalyzeDescriptionRequest,
    AnalyzeFoodRequest,
    ChatRequest,
    FixFoodRequest,
    NutritionRequest,
)
from food_relay.app_logging import configure_logging
from food_relay.config import parse_allowed_origins
from food_relay.containers import AppContainer
from food_relay.domain.errors import SERVER_ERROR, RelayError

_RELAY_GUARDS = [Depends(enforce_rate_limit), Depends(require_api_key)]


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_allowed_origins(container.settings.allowed_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
        body: dict[str, object] = {"success": False, "error": exc.message}
        if exc.raw_content is not None:
            body["raw_content"] = exc.raw_content
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500, content={"success": False, "error": SERVER_ERROR}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info("Rejected malformed request to %s", request.url.path)
        return JSONResponse(
            status_code=400, content={"success": False, "error": "Invalid request body"}
        )

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"message": "Food Analyzer API Server", "status": "operational"}

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/analyze-food", dependencies=_RELAY_GUARDS)
    async def analyze_food(body: AnalyzeFoodRequest, request: Request) -> dict[str, object]:
        """Analyze a food photo sent as a data URL."""
        state_container: AppContainer = request.app.state.container
        image = _required_text(body.image, "Image data is required")
        record = await state_container.food_analysis_service.analyze_image(image)
        return {"success": True, "data": record.model_dump()}

    @app.post("/api/analyze-description", dependencies=_RELAY_GUARDS)
    async def analyze_description(
        body: AnalyzeDescriptionRequest, request: Request
    ) -> dict[str, object]:
        """Analyze a free-text meal description."""
        state_container: AppContainer = request.app.state.container
        description = _required_text(body.description, "Description is required")
        record = await state_container.text_analysis_service.analyze_description(
            description
        )
        return {"success": True, "data": record.model_dump()}

    @app.post("/api/nutrition", dependencies=_RELAY_GUARDS)
    async def nutrition(body: NutritionRequest, request: Request) -> dict[str, object]:
        """Calculate or modify nutrition for a named food."""
        state_container: AppContainer = request.app.state.container
        food_name = _required_text(body.food_name, "Food name is required")
        serving_size = None if body.serving_size is None else str(body.serving_size)
        data = await state_container.nutrition_service.calculate(
            food_name,
            serving_size=serving_size,
            query=body.query,
            operation_type=body.operation_type,
            instructions=body.instructions,
            current_data=body.current_data,
        )
        return {"success": True, "data": data}

    @app.post("/api/fix-food", dependencies=_RELAY_GUARDS)
    async def fix_food(body: FixFoodRequest, request: Request) -> dict[str, object]:
        """Correct or adjust an existing food entry."""
        state_container: AppContainer = request.app.state.container
        query = _optional_text(body.query)
        instructions = _optional_text(body.instructions)
        if not (query or instructions or body.food_data):
            raise RelayError(400, "Query, instructions or food data is required")
        data = await state_container.nutrition_service.fix_food(
            query=query,
            instructions=instructions,
            operation_type=body.operation_type,
            food_data=body.food_data,
        )
        return {"success": True, "data": data}

    @app.post("/api/chat", dependencies=_RELAY_GUARDS)
    async def chat(body: ChatRequest, request: Request) -> dict[str, object]:
        """Relay a conversation and return the full reply."""
        state_container: AppContainer = request.app.state.container
        content = await state_container.chat_service.reply(_chat_messages(body))
        return {"success": True, "content": content}

    @app.post("/api/chat/stream", dependencies=_RELAY_GUARDS)
    async def chat_stream(body: ChatRequest, request: Request) -> dict[str, object]:
        """Relay a conversation and return the reply as word chunks."""
        state_container: AppContainer = request.app.state.container
        chunks, content = await state_container.chat_service.reply_in_chunks(
            _chat_messages(body)
        )
        return {"success": True, "chunks": chunks, "full_content": content}

    return app


def _optional_text(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip()


def _required_text(value: str | None, message: str) -> str:
    text = _optional_text(value)
    if text is None:
        raise RelayError(400, message)
    return text


def _chat_messages(body: ChatRequest) -> list[dict[str, object]]:
    if not body.messages:
        raise RelayError(400, "Messages array is required")
    return [message.model_dump() for message in body.messages]
