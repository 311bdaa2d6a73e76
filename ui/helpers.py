"""Helper functions for UI - API client calls and view builders."""

from typing import Any

import httpx

from backend.app.config import get_settings
from backend.app.residency.dates import format_dmy, parse_iso_date

SAFE_MESSAGE = "Leaving on this date will not break the residence permit rules during the following year."
UNSAFE_MESSAGE = (
    "Leaving on this date may breach the {threshold}-day rule and put your residence permit at risk."
)


def get_auth_header() -> dict[str, str]:
    """Get auth header for API calls.

    Single-user local setup: always the default user id.
    """
    user_id = "00000000-0000-0000-0000-000000000002"
    return {"Authorization": f"Bearer {user_id}"}


def fetch_trips(backend_url: str) -> list[dict[str, Any]]:
    """GET /trips.

    Raises:
        httpx.HTTPStatusError: If request fails
    """
    response = httpx.get(f"{backend_url}/trips", headers=get_auth_header(), timeout=10.0)
    response.raise_for_status()
    trips: list[dict[str, Any]] = response.json()["trips"]
    return trips


def add_trips(backend_url: str, rows: list[dict[str, str]]) -> tuple[list[dict[str, Any]], str | None]:
    """POST /trips with form rows.

    Returns:
        (added trips, validation error message or None)

    Raises:
        httpx.HTTPStatusError: For failures other than validation
    """
    response = httpx.post(
        f"{backend_url}/trips",
        json={"trips": rows},
        headers=get_auth_header(),
        timeout=10.0,
    )
    if response.status_code == 422:
        detail = response.json().get("detail")
        return [], detail if isinstance(detail, str) else "Invalid trip data."
    response.raise_for_status()
    added: list[dict[str, Any]] = response.json()["trips"]
    return added, None


def delete_trip(backend_url: str, trip_id: str) -> None:
    """DELETE /trips/{trip_id}.

    Raises:
        httpx.HTTPStatusError: If request fails
    """
    response = httpx.delete(
        f"{backend_url}/trips/{trip_id}", headers=get_auth_header(), timeout=10.0
    )
    response.raise_for_status()


def extract_trips(backend_url: str, image_base64: str, mime_type: str) -> list[dict[str, str]]:
    """POST /trips/extract; returns candidate rows (not stored).

    Raises:
        httpx.HTTPStatusError: If request fails
    """
    response = httpx.post(
        f"{backend_url}/trips/extract",
        json={"image_base64": image_base64, "mime_type": mime_type},
        headers=get_auth_header(),
        timeout=60.0,  # Vision models can be slow
    )
    response.raise_for_status()
    rows: list[dict[str, str]] = response.json()["trips"]
    return rows


def fetch_status(backend_url: str, calculation_date: str) -> dict[str, Any]:
    """GET /status for a calculation date.

    Raises:
        httpx.HTTPStatusError: If request fails
    """
    response = httpx.get(
        f"{backend_url}/status",
        params={"on": calculation_date},
        headers=get_auth_header(),
        timeout=10.0,
    )
    response.raise_for_status()
    result: dict[str, Any] = response.json()
    return result


def fetch_departure_check(backend_url: str, departure: str) -> dict[str, Any]:
    """GET /departure-check for a planned departure.

    Raises:
        httpx.HTTPStatusError: If request fails
    """
    response = httpx.get(
        f"{backend_url}/departure-check",
        params={"date": departure},
        headers=get_auth_header(),
        timeout=10.0,
    )
    response.raise_for_status()
    result: dict[str, Any] = response.json()
    return result


def send_chat(
    backend_url: str, message: str, history: list[dict[str, str]], calculation_date: str
) -> dict[str, Any]:
    """POST /assistant/chat.

    Raises:
        httpx.HTTPStatusError: If request fails
    """
    response = httpx.post(
        f"{backend_url}/assistant/chat",
        json={"message": message, "history": history, "calculation_date": calculation_date},
        headers=get_auth_header(),
        timeout=60.0,
    )
    response.raise_for_status()
    result: dict[str, Any] = response.json()
    return result


# --- View builders (pure, no I/O) ---


def build_status_view(
    status: dict[str, Any], calculation_date: str, threshold: int | None = None
) -> dict[str, Any]:
    """Build the status cards.

    Args:
        status: ResidencyStatus dict with days_in, days_needed
        calculation_date: Reference date (YYYY-MM-DD)
        threshold: Days required; defaults to the configured residency threshold

    Returns:
        Dict with title, days_in, days_needed and meets_threshold
    """
    days_in = int(status.get("days_in", 0))
    if threshold is None:
        threshold = get_settings().residency_threshold_days
    days_needed = int(status.get("days_needed", threshold))
    return {
        "title": f"Status on {format_dmy(parse_iso_date(calculation_date))}",
        "days_in": days_in,
        "days_needed": days_needed,
        "meets_threshold": days_needed == 0,
    }


def build_trip_rows(trips: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Build trip list rows.

    Args:
        trips: TripV1 dicts with id, departure, arrival

    Returns:
        List of dicts with id, label ("DD.MM.YYYY - DD.MM.YYYY") and days_away
    """
    rows = []
    for trip in trips:
        departure = parse_iso_date(trip.get("departure"))
        arrival = parse_iso_date(trip.get("arrival"))
        days_away = (arrival - departure).days if departure and arrival else 0
        rows.append(
            {
                "id": trip.get("id", ""),
                "label": f"{format_dmy(departure)} - {format_dmy(arrival)}",
                "days_away": days_away,
            }
        )
    return rows


def build_departure_view(
    check: dict[str, Any] | None, threshold: int | None = None
) -> dict[str, Any] | None:
    """Build the departure verdict panel.

    Args:
        check: DepartureCheck dict, or None when no date is chosen
        threshold: Days required; defaults to the configured residency threshold

    Returns:
        None when there is nothing to show, else dict with is_safe, message, detail
    """
    if check is None or not check.get("desired_departure"):
        return None

    if threshold is None:
        threshold = get_settings().residency_threshold_days

    is_safe = bool(check.get("is_safe"))
    detail = ""
    first_violation = parse_iso_date(check.get("first_violation"))
    if not is_safe and first_violation is not None:
        detail = (
            f"Without returning, you would fall below {threshold} days on "
            f"{format_dmy(first_violation)}."
        )

    return {
        "is_safe": is_safe,
        "message": SAFE_MESSAGE if is_safe else UNSAFE_MESSAGE.format(threshold=threshold),
        "detail": detail,
    }
