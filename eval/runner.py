"""Eval runner - loads residency scenarios and evaluates them against the core."""

import sys
from pathlib import Path
from typing import Any

import yaml

from backend.app.models import DepartureCheck, ResidencyStatus, TripDraft
from backend.app.residency.accountant import days_present
from backend.app.residency.simulator import check_departure

SCENARIOS_PATH = Path(__file__).resolve().parent / "scenarios.yaml"


def load_scenarios(path: Path = SCENARIOS_PATH) -> dict[str, Any]:
    """Load scenarios from YAML."""
    with open(path) as f:
        result: dict[str, Any] = yaml.safe_load(f)
        return result


def build_trips_from_yaml(trips_data: list[dict[str, str]]) -> list[TripDraft]:
    """Build trip rows from YAML data."""
    return [TripDraft(departure=t["departure"], arrival=t["arrival"]) for t in trips_data]


def evaluate_expectations(
    status: ResidencyStatus, check: DepartureCheck | None, expect: dict[str, Any]
) -> tuple[int, int]:
    """Compare computed values with expectations; return (passed, total)."""
    actual: dict[str, Any] = {"days_in": status.days_in, "days_needed": status.days_needed}
    if check is not None:
        actual["is_safe"] = check.is_safe
        actual["first_violation"] = (
            check.first_violation.isoformat() if check.first_violation else None
        )

    passed = 0
    total = len(expect)

    for key, expected in expect.items():
        value = actual.get(key)
        if value == expected:
            passed += 1
            print(f"  ✓ PASS: {key} == {expected!r}")
        else:
            print(f"  ✗ FAIL: {key} expected {expected!r}, got {value!r}")

    return passed, total


def main() -> int:
    """Run eval scenarios."""
    scenarios_data = load_scenarios()
    scenarios = scenarios_data["scenarios"]

    total_passed = 0
    total_expectations = 0

    for scenario in scenarios:
        scenario_id = scenario["scenario_id"]
        description = scenario["description"]
        print(f"\n=== Scenario: {scenario_id} ===")
        print(f"Description: {description}")

        trips = build_trips_from_yaml(scenario.get("trips") or [])
        status = days_present(scenario["reference_date"], trips)
        check = check_departure(scenario["departure"], trips) if "departure" in scenario else None

        passed, total = evaluate_expectations(status, check, scenario["expect"])
        total_passed += passed
        total_expectations += total

        print(f"Result: {passed}/{total} expectations met")

    print("\n=== Summary ===")
    print(f"Total: {total_passed}/{total_expectations} expectations met")

    if total_passed < total_expectations:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
