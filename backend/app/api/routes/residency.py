"""Residency endpoints - GET /status, GET /departure-check."""

import logging
import time
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from backend.app.api.auth import get_current_context
from backend.app.api.deps import get_trip_repository
from backend.app.config import get_settings
from backend.app.db.context import RequestContext
from backend.app.db.repositories import TripRepository
from backend.app.models.residency import DepartureCheck, ResidencyStatus
from backend.app.residency.accountant import days_present
from backend.app.residency.simulator import check_departure
from backend.app.utils.metrics import metrics

logger = logging.getLogger(__name__)

router = APIRouter(tags=["residency"])


@router.get("/status", response_model=ResidencyStatus)
async def get_status(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    repo: Annotated[TripRepository, Depends(get_trip_repository)],
    on: Annotated[str | None, Query(description="Reference date YYYY-MM-DD")] = None,
) -> ResidencyStatus:
    """Days present in the trailing year ending on the reference date.

    Defaults to today. An invalid date yields the start-of-tracking status
    rather than an error.
    """
    settings = get_settings()
    reference = date.today().isoformat() if on is None else on
    trips = await repo.list_trips(ctx)

    return days_present(
        reference,
        trips,
        threshold=settings.residency_threshold_days,
        merge_overlaps=settings.merge_overlapping_trips,
    )


@router.get("/departure-check", response_model=DepartureCheck)
async def get_departure_check(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    repo: Annotated[TripRepository, Depends(get_trip_repository)],
    departure: Annotated[str, Query(alias="date", description="Planned departure YYYY-MM-DD")] = "",
) -> DepartureCheck:
    """Check whether leaving on a date and staying away can breach the rule."""
    settings = get_settings()
    trips = await repo.list_trips(ctx)

    start_time = time.monotonic()
    verdict = check_departure(
        departure,
        trips,
        threshold=settings.residency_threshold_days,
        horizon_days=settings.forecast_horizon_days,
        absence_years=settings.hypothetical_absence_years,
        merge_overlaps=settings.merge_overlapping_trips,
    )
    elapsed_ms = (time.monotonic() - start_time) * 1000
    metrics.record_departure_check(verdict.is_safe, elapsed_ms)

    logger.info(
        f"[GET /departure-check] user_id={ctx.user_id} date={departure!r} safe={verdict.is_safe}",
        extra={
            "structured": {
                "user_id": str(ctx.user_id),
                "departure": departure,
                "is_safe": verdict.is_safe,
                "first_violation": (
                    verdict.first_violation.isoformat() if verdict.first_violation else None
                ),
            }
        },
    )

    return verdict
