"""Models package - re-exports for convenience."""

from backend.app.models.assistant import AssistantReply, ChatMessage, ExtractionResult
from backend.app.models.residency import DepartureCheck, ResidencyStatus
from backend.app.models.trip import TripDraft, TripV1

__all__ = [
    # Trips
    "TripDraft",
    "TripV1",
    # Residency
    "ResidencyStatus",
    "DepartureCheck",
    # Assistant
    "ChatMessage",
    "AssistantReply",
    "ExtractionResult",
]
