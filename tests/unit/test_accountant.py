"""Unit tests for the trailing-window accountant."""

from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from backend.app.models.trip import TripDraft, TripV1
from backend.app.residency.accountant import (
    count_days_in,
    days_out_in_window,
    days_present,
    merge_absences,
    to_intervals,
)


def trip(departure: str, arrival: str) -> TripDraft:
    """Build a trip row."""
    return TripDraft(departure=departure, arrival=arrival)


@pytest.mark.parametrize(
    ("reference", "period_length"),
    [
        ("2025-11-06", 365),
        ("2024-12-31", 366),
        ("2025-02-28", 366),  # window starts on 2024-02-29
        ("2025-03-01", 365),
        ("2024-03-01", 366),
        ("2023-06-15", 365),
    ],
)
def test_empty_trips_yield_full_period(reference: str, period_length: int) -> None:
    """Test that with no trips every day of the window is present."""
    status = days_present(reference, [])

    assert status.days_in == period_length
    assert status.days_needed == 0


def test_leap_day_reference_follows_year_rollover() -> None:
    """Test that a Feb 29 reference starts the window on Mar 2 of the prior year."""
    # 2023-02-29 does not exist, so one year before 2024-02-29 is 2023-03-01
    status = days_present("2024-02-29", [])

    assert status.days_in == 365


def test_single_month_abroad() -> None:
    """Test 31 days abroad inside the window."""
    status = days_present("2025-11-06", [trip("2025-01-01", "2025-02-01")])

    assert status.days_in == 334
    assert status.days_needed == 0


def test_two_hundred_days_abroad() -> None:
    """Test that 200 days abroad leaves 165 present and 18 needed."""
    trips = [trip("2025-01-01", "2025-04-01"), trip("2025-05-01", "2025-08-19")]

    status = days_present("2025-11-06", trips)

    assert status.days_in == 165
    assert status.days_needed == 18


def test_trip_equal_to_window_bounds() -> None:
    """Test that a trip covering the exact window leaves zero days present."""
    status = days_present("2025-11-06", [trip("2024-11-07", "2025-11-07")])

    assert status.days_in == 0
    assert status.days_needed == 183


def test_trips_outside_window_do_not_count() -> None:
    """Test that trips wholly before or after the window are ignored."""
    base = [trip("2025-01-01", "2025-02-01")]
    outside = [
        trip("2023-01-01", "2024-11-07"),  # ends on window start (exclusive end)
        trip("2025-11-07", "2025-12-24"),  # starts the day after the reference
    ]

    assert days_present("2025-11-06", base + outside) == days_present("2025-11-06", base)


def test_partial_overlap_is_clipped() -> None:
    """Test that only the in-window part of a straddling trip counts."""
    # 2024-11-01 .. 2024-11-17 straddles the window start 2024-11-07: 10 days inside
    status = days_present("2025-11-06", [trip("2024-11-01", "2024-11-17")])
    assert status.days_in == 355

    # Trip starting on the reference day: only that day inside
    status = days_present("2025-11-06", [trip("2025-11-06", "2025-12-01")])
    assert status.days_in == 364


def test_departure_day_absent_arrival_day_present() -> None:
    """Test half-open semantics of a one-night trip."""
    status = days_present("2025-11-06", [trip("2025-11-05", "2025-11-06")])

    assert status.days_in == 364


def test_invalid_reference_date_falls_back() -> None:
    """Test the start-of-tracking fallback for unusable reference dates."""
    for reference in ["", "garbage", "2025-02-30", None]:
        status = days_present(reference, [trip("2025-01-01", "2025-02-01")])
        assert status.days_in == 0
        assert status.days_needed == 183


def test_out_of_range_reference_date_falls_back() -> None:
    """Test that a window beyond the supported date range does not raise."""
    status = days_present(date.max, [])

    assert status.days_in == 0
    assert status.days_needed == 183


def test_trips_with_missing_dates_are_skipped() -> None:
    """Test that incomplete rows contribute nothing."""
    trips = [trip("", "2025-02-01"), trip("2025-01-01", ""), trip("2025-01-01", "bad")]

    assert days_present("2025-11-06", trips).days_in == 365


def test_accepts_stored_trips() -> None:
    """Test that TripV1 instances work as input."""
    stored = [TripV1(id="a", departure=date(2025, 1, 1), arrival=date(2025, 2, 1))]

    assert days_present(date(2025, 11, 6), stored).days_in == 334


def test_overlapping_trips_counted_once_by_default() -> None:
    """Test that overlapping days are not double counted."""
    trips = [trip("2025-01-01", "2025-02-01"), trip("2025-01-15", "2025-02-15")]

    status = days_present("2025-11-06", trips)

    # Union is 2025-01-01 .. 2025-02-15 = 45 days
    assert status.days_in == 320


def test_overlapping_trips_summed_without_merge() -> None:
    """Test the per-trip summation when merging is disabled."""
    trips = [trip("2025-01-01", "2025-02-01"), trip("2025-01-15", "2025-02-15")]

    status = days_present("2025-11-06", trips, merge_overlaps=False)

    # 31 + 31 days
    assert status.days_in == 303


def test_days_needed_uses_custom_threshold() -> None:
    """Test a non-default threshold."""
    status = days_present("2025-11-06", [trip("2025-01-01", "2025-08-01")], threshold=200)

    # 212 days abroad -> 153 present
    assert status.days_in == 153
    assert status.days_needed == 47


def test_days_present_is_idempotent() -> None:
    """Test that repeated calls with identical inputs agree and inputs are untouched."""
    trips = [trip("2025-01-01", "2025-02-01"), trip("2024-12-01", "2024-12-20")]
    snapshot = [t.model_copy() for t in trips]

    first = days_present("2025-11-06", trips)
    second = days_present("2025-11-06", trips)

    assert first == second
    assert trips == snapshot


def test_merge_absences_merges_touching_and_drops_empty() -> None:
    """Test interval merging rules."""
    d = date(2025, 1, 1)
    intervals = [
        (d + timedelta(days=10), d + timedelta(days=20)),
        (d, d + timedelta(days=10)),  # touches the first
        (d + timedelta(days=30), d + timedelta(days=30)),  # empty
        (d + timedelta(days=40), d + timedelta(days=35)),  # inverted
        (d + timedelta(days=50), d + timedelta(days=60)),
    ]

    assert merge_absences(intervals) == [
        (d, d + timedelta(days=20)),
        (d + timedelta(days=50), d + timedelta(days=60)),
    ]


def test_days_out_in_window_ignores_inverted_intervals() -> None:
    """Test that an interval with arrival before departure covers nothing."""
    start, end = date(2025, 1, 1), date(2026, 1, 1)

    assert days_out_in_window(start, end, [(date(2025, 6, 1), date(2025, 5, 1))]) == 0


def test_count_days_in_matches_days_present() -> None:
    """Test that the interval-level helper agrees with the public function."""
    trips = [trip("2025-03-01", "2025-03-11")]

    assert count_days_in(date(2025, 11, 6), to_intervals(trips)) == days_present(
        "2025-11-06", trips
    ).days_in


def test_trip_with_non_string_dates_is_skipped() -> None:
    """Test that trip dates of the wrong type are treated as missing."""
    odd_trip = SimpleNamespace(departure=20250101, arrival="2025-02-01")

    status = days_present("2025-11-06", [odd_trip])

    assert status.days_in == 365
    assert status.days_needed == 0


def test_malformed_trip_object_falls_back() -> None:
    """Test that objects without trip dates never raise."""
    status = days_present("2025-11-06", [object()])  # type: ignore[list-item]

    assert status.days_in == 0
    assert status.days_needed == 183


def test_non_string_reference_date_falls_back() -> None:
    """Test that a reference date of the wrong type never raises."""
    status = days_present(20251106, [])  # type: ignore[arg-type]

    assert status.days_in == 0
    assert status.days_needed == 183


def test_unmerged_overlaps_can_go_negative() -> None:
    """Test that summing overlapping trips is not clamped and still validates."""
    whole_window = trip("2024-11-07", "2025-11-07")

    merged = days_present("2025-11-06", [whole_window, whole_window])
    summed = days_present("2025-11-06", [whole_window, whole_window], merge_overlaps=False)

    assert (merged.days_in, merged.days_needed) == (0, 183)
    assert (summed.days_in, summed.days_needed) == (-365, 548)
