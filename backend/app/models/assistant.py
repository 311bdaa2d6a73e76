"""Assistant and extraction models."""

from typing import Literal

from pydantic import BaseModel, Field

from backend.app.models.trip import TripDraft


class ChatMessage(BaseModel):
    """Single chat turn."""

    role: Literal["user", "assistant"]
    text: str


class AssistantReply(BaseModel):
    """Assistant answer with the backend that produced it."""

    text: str
    source: Literal["openai", "stub"]


class ExtractionResult(BaseModel):
    """Candidate trips read from an image; never stored directly."""

    trips: list[TripDraft] = Field(default_factory=list)
    source: Literal["openai", "stub"]
