"""Integration tests for residency endpoints."""

from fastapi.testclient import TestClient


def add(client: TestClient, departure: str, arrival: str) -> None:
    response = client.post(
        "/trips", json={"trips": [{"departure": departure, "arrival": arrival}]}
    )
    assert response.status_code == 201


def test_status_with_no_trips(client: TestClient) -> None:
    """Test a full year present."""
    response = client.get("/status", params={"on": "2025-11-06"})

    assert response.status_code == 200
    assert response.json() == {"days_in": 365, "days_needed": 0}


def test_status_two_hundred_days_abroad(client: TestClient) -> None:
    """Test a person who is 18 days short."""
    add(client, "2025-01-01", "2025-04-01")
    add(client, "2025-05-01", "2025-08-19")

    response = client.get("/status", params={"on": "2025-11-06"})

    assert response.json() == {"days_in": 165, "days_needed": 18}


def test_status_invalid_date_falls_back(client: TestClient) -> None:
    """Test that an invalid reference date is not an error."""
    response = client.get("/status", params={"on": "2025-13-45"})

    assert response.status_code == 200
    assert response.json() == {"days_in": 0, "days_needed": 183}


def test_status_defaults_to_today(client: TestClient) -> None:
    """Test the default reference date with no trips."""
    response = client.get("/status")

    assert response.status_code == 200
    assert response.json()["days_in"] in (365, 366)


def test_departure_check_without_date_is_safe(client: TestClient) -> None:
    """Test that no planned departure is trivially safe."""
    response = client.get("/departure-check")

    assert response.status_code == 200
    assert response.json() == {"desired_departure": "", "is_safe": True, "first_violation": None}


def test_departure_check_at_threshold(client: TestClient) -> None:
    """Test leaving with exactly 183 days present."""
    add(client, "2024-11-07", "2025-05-08")

    response = client.get("/departure-check", params={"date": "2025-11-06"})

    assert response.json() == {
        "desired_departure": "2025-11-06",
        "is_safe": False,
        "first_violation": "2025-11-06",
    }


def test_departure_check_invalid_date_is_unsafe(client: TestClient) -> None:
    """Test that an unparseable departure is reported unsafe."""
    response = client.get("/departure-check", params={"date": "not-a-date"})

    data = response.json()
    assert data["is_safe"] is False
    assert data["first_violation"] is None
