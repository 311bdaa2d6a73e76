"""Trip intake - validation shared by manual entry and image extraction."""

from collections.abc import Iterable
from datetime import date

from backend.app.models.trip import TripDraft
from backend.app.residency.dates import parse_iso_date


class TripValidationError(ValueError):
    """A submitted batch of trips cannot be accepted."""


def filled_drafts(drafts: Iterable[TripDraft]) -> list[TripDraft]:
    """Drop rows where neither date was entered."""
    return [d for d in drafts if d.departure.strip() or d.arrival.strip()]


def normalize_extracted(drafts: Iterable[TripDraft]) -> list[TripDraft]:
    """Keep extracted rows that carry both dates.

    Extractors may return partial rows; those are discarded rather than
    reported, the remaining rows still go through validate_drafts.
    """
    return [
        TripDraft(departure=d.departure.strip(), arrival=d.arrival.strip())
        for d in drafts
        if d.departure.strip() and d.arrival.strip()
    ]


def validate_drafts(
    drafts: Iterable[TripDraft],
    existing: Iterable[tuple[date, date]] = (),
) -> list[tuple[date, date]]:
    """Validate a batch of trip rows.

    Rows are numbered from 1 among the filled rows, matching what the user
    sees in the form.

    Args:
        drafts: Rows as entered
        existing: Already stored (departure, arrival) pairs, used for dedup

    Returns:
        New (departure, arrival) pairs in submission order, duplicates removed

    Raises:
        TripValidationError: On the first invalid row, or if no row is filled
    """
    rows = filled_drafts(drafts)
    if not rows:
        raise TripValidationError("Add at least one trip.")

    seen = set(existing)
    accepted: list[tuple[date, date]] = []

    for number, row in enumerate(rows, start=1):
        if not row.departure.strip() or not row.arrival.strip():
            raise TripValidationError(f"Fill in both dates for trip #{number}.")

        departure = parse_iso_date(row.departure)
        arrival = parse_iso_date(row.arrival)
        if departure is None or arrival is None:
            raise TripValidationError(f"Trip #{number} has an invalid date.")

        if departure >= arrival:
            raise TripValidationError(f"Departure for trip #{number} must be before arrival.")

        pair = (departure, arrival)
        if pair in seen:
            continue
        seen.add(pair)
        accepted.append(pair)

    return accepted
