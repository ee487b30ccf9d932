"""Request bodies for the relay routes.

Fields are optional at the schema level so that missing values surface as
the relay's own 400 messages rather than framework validation errors.
"""

from pydantic import BaseModel


class AnalyzeFoodRequest(BaseModel):
    image: str | None = None


class NutritionRequest(BaseModel):
    food_name: str | None = None
    serving_size: str | int | float | None = None
    query: str | None = None
    operation_type: str | None = None
    instructions: str | None = None
    current_data: dict[str, object] | None = None


class FixFoodRequest(BaseModel):
    query: str | None = None
    instructions: str | None = None
    operation_type: str | None = None
    food_data: dict[str, object] | None = None


class ChatMessage(BaseModel):
    role: str = "user"
    content: str | list[dict[str, object]] = ""


class ChatRequest(BaseModel):
    messages: list[ChatMessage] | None = None


class AnalyzeDescriptionRequest(BaseModel):
    description: str | None = None
