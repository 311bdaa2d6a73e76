"""Residency accounting results."""

from datetime import date

from pydantic import BaseModel, Field


class ResidencyStatus(BaseModel):
    """Days present in the trailing window ending on a reference date."""

    days_in: int = Field(
        ...,
        description=(
            "Days present in the trailing 365/366-day window; negative only when "
            "overlapping trips are summed without merging"
        ),
    )
    days_needed: int = Field(..., ge=0, description="Days still missing to reach the threshold")


class DepartureCheck(BaseModel):
    """Verdict for a planned departure followed by an open-ended absence."""

    desired_departure: str = Field("", description="Candidate departure date as entered")
    is_safe: bool
    first_violation: date | None = Field(
        None, description="First date the threshold is breached if the person stays away"
    )
