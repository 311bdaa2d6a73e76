"""Trip endpoints - GET /trips, POST /trips, DELETE /trips/{trip_id}, POST /trips/extract."""

import base64
import binascii
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field

from backend.app.api.auth import get_current_context
from backend.app.api.deps import get_trip_repository
from backend.app.config import get_settings
from backend.app.db.context import RequestContext
from backend.app.db.repositories import TripRepository
from backend.app.llm.extractor import TripExtractionError, TripExtractor, get_trip_extractor
from backend.app.models.assistant import ExtractionResult
from backend.app.models.trip import TripDraft, TripV1
from backend.app.trips.intake import TripValidationError, validate_drafts
from backend.app.utils.metrics import metrics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["trips"])


class AddTripsRequest(BaseModel):
    """Request body for POST /trips."""

    trips: list[TripDraft] = Field(..., description="Rows as entered; empty rows are ignored")


class TripListResponse(BaseModel):
    """Response for GET /trips and POST /trips."""

    trips: list[TripV1]


class ExtractTripsRequest(BaseModel):
    """Request body for POST /trips/extract."""

    image_base64: str = Field(..., min_length=1, description="Base64-encoded image")
    mime_type: str = Field(..., pattern=r"^image/[a-z0-9.+-]+$", description="Image MIME type")


@router.get("", response_model=TripListResponse)
async def list_trips(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    repo: Annotated[TripRepository, Depends(get_trip_repository)],
) -> TripListResponse:
    """List stored trips, sorted by departure."""
    return TripListResponse(trips=await repo.list_trips(ctx))


@router.post("", response_model=TripListResponse, status_code=status.HTTP_201_CREATED)
async def add_trips(
    request: AddTripsRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    repo: Annotated[TripRepository, Depends(get_trip_repository)],
) -> TripListResponse:
    """Validate and store a batch of trips.

    Duplicates of already stored trips are skipped.

    Returns:
        The trips that were added

    Raises:
        HTTPException: 422 with the first validation message
    """
    existing = [(t.departure, t.arrival) for t in await repo.list_trips(ctx)]

    try:
        pairs = validate_drafts(request.trips, existing=existing)
    except TripValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    added = await repo.add_trips(pairs, ctx) if pairs else []
    metrics.inc_trips_added(len(added))

    logger.info(
        f"[POST /trips] user_id={ctx.user_id} added={len(added)}",
        extra={"structured": {"user_id": str(ctx.user_id), "added": len(added)}},
    )

    return TripListResponse(trips=sorted(added, key=lambda t: t.departure))


@router.delete("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_trip(
    trip_id: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    repo: Annotated[TripRepository, Depends(get_trip_repository)],
) -> Response:
    """Delete a trip by id."""
    deleted = await repo.delete_trip(trip_id, ctx)

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")

    logger.info(f"[DELETE /trips/{trip_id}] user_id={ctx.user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/extract", response_model=ExtractionResult)
async def extract_trips(
    request: ExtractTripsRequest,
    extractor: Annotated[TripExtractor, Depends(get_trip_extractor)],
) -> ExtractionResult:
    """Read candidate trips from a screenshot.

    Nothing is stored: the client reviews the rows and submits them through
    POST /trips.

    Raises:
        HTTPException: 422 for undecodable data, 413 for oversized images,
            502 when the extraction service fails
    """
    try:
        image_bytes = base64.b64decode(request.image_base64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="image_base64 is not valid base64"
        ) from e

    if len(image_bytes) > get_settings().max_image_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="Image is too large"
        )

    try:
        result = await extractor.extract(
            image_base64=request.image_base64, mime_type=request.mime_type
        )
    except TripExtractionError as e:
        logger.error(f"[POST /trips/extract] failed: {e}")
        metrics.inc_extraction(source="openai", outcome="error")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Image analysis failed. Please try again.",
        ) from e

    metrics.inc_extraction(source=result.source, outcome="success" if result.trips else "empty")
    return result
