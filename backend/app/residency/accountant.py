"""Window accountant - days present in the trailing one-year window.

The accountant is a pure function of a reference date and a snapshot of
absence intervals. Intervals are half-open ``[departure, arrival)``: the
departure day is spent abroad, the arrival day is spent in the country.
"""

from collections.abc import Iterable, Sequence
from datetime import date
from typing import Protocol

from backend.app.models.residency import ResidencyStatus
from backend.app.residency.dates import days_between, parse_iso_date, trailing_window

RESIDENCY_THRESHOLD_DAYS = 183

Interval = tuple[date, date]


class AbsenceLike(Protocol):
    """Anything with departure/arrival dates (stored trips, drafts, test doubles)."""

    @property
    def departure(self) -> str | date: ...

    @property
    def arrival(self) -> str | date: ...


def to_intervals(trips: Iterable[AbsenceLike]) -> list[Interval]:
    """Convert trips to date intervals, skipping trips with missing or invalid dates."""
    intervals: list[Interval] = []
    for trip in trips:
        departure = parse_iso_date(trip.departure)
        arrival = parse_iso_date(trip.arrival)
        if departure is None or arrival is None:
            continue
        intervals.append((departure, arrival))
    return intervals


def merge_absences(intervals: Iterable[Interval]) -> list[Interval]:
    """Merge overlapping or touching intervals so every day abroad counts once.

    Empty and inverted intervals are dropped; they never cover a day.
    """
    merged: list[Interval] = []
    for start, end in sorted(i for i in intervals if i[1] > i[0]):
        if merged and start <= merged[-1][1]:
            last_start, last_end = merged[-1]
            merged[-1] = (last_start, max(last_end, end))
        else:
            merged.append((start, end))
    return merged


def days_out_in_window(
    window_start: date, window_end_exclusive: date, intervals: Iterable[Interval]
) -> int:
    """Sum the clipped length of every interval inside the window."""
    days_out = 0
    for departure, arrival in intervals:
        overlap_start = max(window_start, departure)
        overlap_end = min(window_end_exclusive, arrival)
        if overlap_end > overlap_start:
            days_out += days_between(overlap_start, overlap_end)
    return days_out


def count_days_in(reference: date, intervals: Sequence[Interval]) -> int:
    """Days present in the trailing window ending on ``reference``.

    Intervals are used as given; merge them first to avoid counting
    overlapping days twice.
    """
    window_start, window_end_exclusive = trailing_window(reference)
    period_length = days_between(window_start, window_end_exclusive)
    return period_length - days_out_in_window(window_start, window_end_exclusive, intervals)


def status_from_days_in(days_in: int, threshold: int = RESIDENCY_THRESHOLD_DAYS) -> ResidencyStatus:
    """Build a status from a days-present count."""
    return ResidencyStatus(days_in=days_in, days_needed=max(0, threshold - days_in))


def days_present(
    reference_date: str | date | None,
    trips: Iterable[AbsenceLike],
    *,
    threshold: int = RESIDENCY_THRESHOLD_DAYS,
    merge_overlaps: bool = True,
) -> ResidencyStatus:
    """Compute days present and days still needed on a reference date.

    Never raises: an unusable reference date or malformed trip objects yield
    the start-of-tracking status (0 days in, full threshold needed).

    Args:
        reference_date: Last day of the window (YYYY-MM-DD or date)
        trips: Absence intervals; need not be sorted
        threshold: Days present required in the window
        merge_overlaps: Count days covered by several trips once. With False,
            each trip's clipped length is summed independently.

    Returns:
        ResidencyStatus for the window ending on reference_date
    """
    fallback = ResidencyStatus(days_in=0, days_needed=threshold)

    reference = parse_iso_date(reference_date)
    if reference is None:
        return fallback

    try:
        intervals = to_intervals(trips)
        if merge_overlaps:
            intervals = merge_absences(intervals)
        days_in = count_days_in(reference, intervals)
    except (AttributeError, OverflowError, TypeError, ValueError):
        return fallback

    return status_from_days_in(days_in, threshold)
