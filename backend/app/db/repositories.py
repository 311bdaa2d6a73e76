"""Repository protocol interfaces for data access."""

from datetime import date
from typing import Protocol

from backend.app.db.context import RequestContext
from backend.app.models.trip import TripV1


class TripRepository(Protocol):
    """Repository for a user's recorded trips."""

    async def list_trips(self, ctx: RequestContext) -> list[TripV1]:
        """List trips sorted by departure ascending.

        Args:
            ctx: Request context (enforces tenancy)

        Returns:
            Stored trips
        """
        ...

    async def add_trips(
        self, pairs: list[tuple[date, date]], ctx: RequestContext
    ) -> list[TripV1]:
        """Store validated (departure, arrival) pairs.

        Args:
            pairs: Validated pairs with departure < arrival
            ctx: Request context

        Returns:
            The newly stored trips with their ids
        """
        ...

    async def delete_trip(self, trip_id: str, ctx: RequestContext) -> bool:
        """Delete a trip by id.

        Args:
            trip_id: Trip id
            ctx: Request context (enforces tenancy)

        Returns:
            True if a trip was deleted
        """
        ...
