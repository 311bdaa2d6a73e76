"""Trip models - absence intervals as entered and as stored."""

from datetime import date

from pydantic import BaseModel, Field, ValidationInfo, field_validator


class TripDraft(BaseModel):
    """Raw trip row as collected from a form or an extractor.

    Both fields are free text and may be empty or malformed; intake
    validation decides whether the row becomes a stored trip.
    """

    departure: str = Field("", description="Departure date, expected YYYY-MM-DD")
    arrival: str = Field("", description="Arrival (re-entry) date, expected YYYY-MM-DD")


class TripV1(BaseModel):
    """Stored absence interval [departure, arrival).

    The departure day counts as a day abroad; the arrival day counts as a
    day present in the country.
    """

    id: str
    departure: date
    arrival: date

    @field_validator("arrival")
    @classmethod
    def validate_arrival_after_departure(cls, v: date, info: ValidationInfo) -> date:
        """Ensure departure < arrival."""
        if "departure" in info.data and v <= info.data["departure"]:
            raise ValueError("arrival must be after departure")
        return v

    @property
    def duration_days(self) -> int:
        """Number of days abroad."""
        return (self.arrival - self.departure).days
