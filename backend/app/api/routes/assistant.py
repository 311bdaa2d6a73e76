"""Assistant endpoint - POST /assistant/chat."""

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from backend.app.api.auth import get_current_context
from backend.app.api.deps import get_trip_repository
from backend.app.config import get_settings
from backend.app.db.context import RequestContext
from backend.app.db.repositories import TripRepository
from backend.app.llm.client import AssistantClient, get_assistant_client
from backend.app.models.assistant import AssistantReply, ChatMessage
from backend.app.residency.accountant import days_present
from backend.app.residency.dates import parse_iso_date

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assistant", tags=["assistant"])


class ChatRequest(BaseModel):
    """Request body for POST /assistant/chat."""

    message: str = Field(..., min_length=1, max_length=2000)
    history: list[ChatMessage] = Field(default_factory=list)
    calculation_date: str | None = Field(None, description="YYYY-MM-DD; defaults to today")


@router.post("/chat", response_model=AssistantReply)
async def chat(
    request: ChatRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    repo: Annotated[TripRepository, Depends(get_trip_repository)],
    assistant: Annotated[AssistantClient, Depends(get_assistant_client)],
) -> AssistantReply:
    """Answer a question in the context of the user's current status."""
    settings = get_settings()
    calculation_date = parse_iso_date(request.calculation_date) or date.today()
    trips = await repo.list_trips(ctx)

    status = days_present(
        calculation_date,
        trips,
        threshold=settings.residency_threshold_days,
        merge_overlaps=settings.merge_overlapping_trips,
    )

    logger.info(f"[POST /assistant/chat] user_id={ctx.user_id} on={calculation_date}")

    return await assistant.reply(
        message=request.message,
        history=request.history,
        status=status,
        calculation_date=calculation_date,
    )
