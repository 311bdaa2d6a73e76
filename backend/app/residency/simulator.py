"""Departure safety simulator.

Answers "if I leave on this date and stay away, when does the residency rule
break?" by appending a long hypothetical absence to the real trips and
evaluating the trailing window on every day of the following year.
"""

import logging
from collections.abc import Iterable
from datetime import date, timedelta

from backend.app.models.residency import DepartureCheck
from backend.app.residency.accountant import (
    RESIDENCY_THRESHOLD_DAYS,
    AbsenceLike,
    Interval,
    count_days_in,
    merge_absences,
    to_intervals,
)
from backend.app.residency.dates import add_years, parse_iso_date

logger = logging.getLogger(__name__)

FORECAST_HORIZON_DAYS = 366
HYPOTHETICAL_ABSENCE_YEARS = 2


def hypothetical_absence(departure: date, years: int = HYPOTHETICAL_ABSENCE_YEARS) -> Interval:
    """Synthetic absence starting on departure and outlasting the horizon."""
    return (departure, add_years(departure, years))


def find_first_violation(
    departure: date,
    trips: Iterable[AbsenceLike],
    *,
    threshold: int = RESIDENCY_THRESHOLD_DAYS,
    horizon_days: int = FORECAST_HORIZON_DAYS,
    absence_years: int = HYPOTHETICAL_ABSENCE_YEARS,
    merge_overlaps: bool = True,
) -> date | None:
    """First day within the horizon whose trailing window drops below threshold.

    Args:
        departure: Planned departure date
        trips: Recorded absences
        threshold: Days present required in every window
        horizon_days: Number of consecutive days checked, starting on departure
        absence_years: Length of the hypothetical absence in calendar years
        merge_overlaps: Count days covered by several absences once

    Returns:
        The first violating date, or None if every window in the horizon holds
    """
    intervals = to_intervals(trips)
    intervals.append(hypothetical_absence(departure, absence_years))
    if merge_overlaps:
        intervals = merge_absences(intervals)

    for offset in range(horizon_days):
        check_date = departure + timedelta(days=offset)
        if count_days_in(check_date, intervals) < threshold:
            return check_date

    return None


def check_departure(
    desired_departure: str | date | None,
    trips: Iterable[AbsenceLike],
    *,
    threshold: int = RESIDENCY_THRESHOLD_DAYS,
    horizon_days: int = FORECAST_HORIZON_DAYS,
    absence_years: int = HYPOTHETICAL_ABSENCE_YEARS,
    merge_overlaps: bool = True,
) -> DepartureCheck:
    """Evaluate a planned departure.

    No planned departure is vacuously safe. An unparseable date, or any
    failure while simulating, is reported as unsafe.
    """
    if desired_departure is None or desired_departure == "":
        return DepartureCheck(desired_departure="", is_safe=True)

    if isinstance(desired_departure, date):
        entered = desired_departure.isoformat()
    else:
        entered = str(desired_departure)

    try:
        departure = parse_iso_date(desired_departure)
        if departure is None:
            return DepartureCheck(desired_departure=entered, is_safe=False)

        first_violation = find_first_violation(
            departure,
            trips,
            threshold=threshold,
            horizon_days=horizon_days,
            absence_years=absence_years,
            merge_overlaps=merge_overlaps,
        )
    except Exception as e:
        logger.error(f"Departure simulation failed for {entered}: {e}", exc_info=True)
        return DepartureCheck(desired_departure=entered, is_safe=False)

    return DepartureCheck(
        desired_departure=entered,
        is_safe=first_violation is None,
        first_violation=first_violation,
    )


def is_departure_safe(
    desired_departure: str | date | None,
    trips: Iterable[AbsenceLike],
    *,
    threshold: int = RESIDENCY_THRESHOLD_DAYS,
    horizon_days: int = FORECAST_HORIZON_DAYS,
    absence_years: int = HYPOTHETICAL_ABSENCE_YEARS,
    merge_overlaps: bool = True,
) -> bool:
    """True when departing on the date cannot breach the rule within the horizon."""
    verdict = check_departure(
        desired_departure,
        trips,
        threshold=threshold,
        horizon_days=horizon_days,
        absence_years=absence_years,
        merge_overlaps=merge_overlaps,
    )
    return verdict.is_safe
