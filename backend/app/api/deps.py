"""Shared FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.engine import get_session
from backend.app.db.repositories import TripRepository
from backend.app.db.sql_repositories import SqlTripRepository


async def get_trip_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> TripRepository:
    """Trip repository bound to the request's database session."""
    return SqlTripRepository(session)
