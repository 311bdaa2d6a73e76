"""SQL implementations of repository interfaces."""

import uuid
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.context import RequestContext
from backend.app.db.models import Trip
from backend.app.db.queries import select_trips
from backend.app.models.trip import TripV1


def _to_model(trip: Trip) -> TripV1:
    return TripV1(id=str(trip.trip_id), departure=trip.departure, arrival=trip.arrival)


class SqlTripRepository:
    """SQL implementation of TripRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_trips(self, ctx: RequestContext) -> list[TripV1]:
        """List trips sorted by departure."""
        result = await self._session.execute(
            select_trips(ctx).order_by(Trip.departure, Trip.created_at)
        )
        return [_to_model(trip) for trip in result.scalars().all()]

    async def add_trips(
        self, pairs: list[tuple[date, date]], ctx: RequestContext
    ) -> list[TripV1]:
        """Store validated pairs."""
        rows = [
            Trip(trip_id=uuid.uuid4(), user_id=ctx.user_id, departure=departure, arrival=arrival)
            for departure, arrival in pairs
        ]
        self._session.add_all(rows)
        await self._session.commit()

        return [_to_model(row) for row in rows]

    async def delete_trip(self, trip_id: str, ctx: RequestContext) -> bool:
        """Delete a trip by id."""
        try:
            trip_uuid = uuid.UUID(trip_id)
        except ValueError:
            return False

        result = await self._session.execute(
            select_trips(ctx).where(Trip.trip_id == trip_uuid)
        )
        trip = result.scalars().first()

        if trip is None:
            return False

        await self._session.delete(trip)
        await self._session.commit()
        return True
