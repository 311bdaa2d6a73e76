"""In-memory implementations of repository interfaces."""

import uuid
from datetime import date

from backend.app.db.context import RequestContext
from backend.app.models.trip import TripV1


class InMemoryTripRepository:
    """In-memory implementation of TripRepository."""

    def __init__(self) -> None:
        self._trips: dict[uuid.UUID, list[TripV1]] = {}

    async def list_trips(self, ctx: RequestContext) -> list[TripV1]:
        """List trips sorted by departure."""
        return sorted(self._trips.get(ctx.user_id, []), key=lambda t: t.departure)

    async def add_trips(
        self, pairs: list[tuple[date, date]], ctx: RequestContext
    ) -> list[TripV1]:
        """Store validated pairs."""
        added = [
            TripV1(id=str(uuid.uuid4()), departure=departure, arrival=arrival)
            for departure, arrival in pairs
        ]
        self._trips.setdefault(ctx.user_id, []).extend(added)
        return added

    async def delete_trip(self, trip_id: str, ctx: RequestContext) -> bool:
        """Delete a trip by id."""
        trips = self._trips.get(ctx.user_id, [])
        remaining = [t for t in trips if t.id != trip_id]
        if len(remaining) == len(trips):
            return False
        self._trips[ctx.user_id] = remaining
        return True
