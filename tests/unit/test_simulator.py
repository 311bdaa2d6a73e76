"""Unit tests for the departure safety simulator."""

from datetime import date
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from backend.app.models.trip import TripDraft
from backend.app.residency.accountant import days_present
from backend.app.residency.simulator import (
    check_departure,
    find_first_violation,
    hypothetical_absence,
    is_departure_safe,
)


def trip(departure: str, arrival: str) -> TripDraft:
    """Build a trip row."""
    return TripDraft(departure=departure, arrival=arrival)


@pytest.mark.parametrize("trips", [[], [trip("2025-01-01", "2025-02-01")]])
def test_empty_departure_is_safe(trips: list[TripDraft]) -> None:
    """Test that no planned departure is vacuously safe."""
    assert is_departure_safe("", trips) is True
    assert is_departure_safe(None, trips) is True


@pytest.mark.parametrize("bad", ["tomorrow", "2025-02-30", "   ", "2025/11/06"])
def test_unparseable_departure_is_unsafe(bad: str) -> None:
    """Test fail-closed behavior for malformed dates."""
    assert is_departure_safe(bad, []) is False

    verdict = check_departure(bad, [])
    assert verdict.is_safe is False
    assert verdict.first_violation is None
    assert verdict.desired_departure == bad


def test_hypothetical_absence_lasts_two_years() -> None:
    """Test the synthetic absence bounds."""
    assert hypothetical_absence(date(2025, 11, 6)) == (date(2025, 11, 6), date(2027, 11, 6))
    assert hypothetical_absence(date(2024, 2, 29)) == (date(2024, 2, 29), date(2026, 3, 1))


def test_departure_at_threshold_breaches_immediately() -> None:
    """Test that leaving with exactly 183 days present is unsafe."""
    trips = [trip("2024-11-07", "2025-05-08")]  # 182 days abroad
    assert days_present("2025-11-06", trips).days_in == 183

    verdict = check_departure("2025-11-06", trips)

    assert verdict.is_safe is False
    assert verdict.first_violation == date(2025, 11, 6)


def test_surplus_only_delays_violation() -> None:
    """Test that a violation well after the departure date is detected."""
    trips = [trip("2024-12-01", "2025-02-04")]  # 65 days abroad
    assert days_present("2025-11-06", trips).days_in == 300

    verdict = check_departure("2025-11-06", trips)

    assert verdict.is_safe is False
    assert verdict.first_violation == date(2026, 5, 7)


def test_no_trips_violation_after_182_days_away() -> None:
    """Test the breach date with a clean history."""
    first = find_first_violation(date(2025, 11, 6), [])

    # On 2026-05-07 the window holds 183 days abroad
    assert first == date(2026, 5, 7)
    assert days_present("2026-05-06", [trip("2025-11-06", "2027-11-06")]).days_in == 183
    assert days_present("2026-05-07", [trip("2025-11-06", "2027-11-06")]).days_in == 182


def test_short_horizon_can_be_safe() -> None:
    """Test that a horizon ending before the breach reports safe."""
    assert find_first_violation(date(2025, 11, 6), [], horizon_days=30) is None
    assert is_departure_safe("2025-11-06", [], horizon_days=30) is True


def test_existing_future_trip_overlapping_hypothetical_counts_once() -> None:
    """Test that a booked trip inside the simulated absence does not shift the breach."""
    booked = [trip("2025-12-01", "2025-12-20")]

    assert find_first_violation(date(2025, 11, 6), booked) == date(2026, 5, 7)
    # Without merging the overlap is counted twice and the breach comes earlier
    assert find_first_violation(date(2025, 11, 6), booked, merge_overlaps=False) == date(
        2026, 4, 18
    )


def test_accepts_date_objects() -> None:
    """Test that a date can be passed instead of a string."""
    verdict = check_departure(date(2025, 11, 6), [])

    assert verdict.desired_departure == "2025-11-06"
    assert verdict.is_safe is False


def test_internal_error_is_reported_unsafe() -> None:
    """Test that an unexpected failure never propagates and yields unsafe."""
    with patch(
        "backend.app.residency.simulator.count_days_in", side_effect=RuntimeError("boom")
    ):
        verdict = check_departure("2025-11-06", [])

    assert verdict.is_safe is False
    assert verdict.first_violation is None


def test_overflowing_departure_is_unsafe() -> None:
    """Test that dates near the end of the calendar do not raise."""
    assert is_departure_safe("9999-12-01", []) is False


def test_trips_are_not_mutated() -> None:
    """Test that the caller's list is left untouched."""
    trips = [trip("2025-01-01", "2025-02-01")]

    check_departure("2025-11-06", trips)

    assert trips == [trip("2025-01-01", "2025-02-01")]


def test_non_string_departure_is_unsafe() -> None:
    """Test that a departure of the wrong type is unsafe instead of raising."""
    verdict = check_departure(20251106, [])  # type: ignore[arg-type]

    assert verdict.desired_departure == "20251106"
    assert verdict.is_safe is False
    assert verdict.first_violation is None


def test_trip_with_non_string_dates_is_skipped() -> None:
    """Test that trips with dates of the wrong type contribute nothing."""
    odd_trip = SimpleNamespace(departure=20250101, arrival="2025-02-01")

    assert check_departure("2025-11-06", [odd_trip]) == check_departure("2025-11-06", [])


def test_malformed_trip_object_is_reported_unsafe() -> None:
    """Test that a trip without dates never propagates an error."""
    verdict = check_departure("2025-11-06", [object()])  # type: ignore[list-item]

    assert verdict.is_safe is False
    assert verdict.first_violation is None
