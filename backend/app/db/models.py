"""SQLAlchemy ORM models."""

import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Index, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class Trip(Base):
    """Trip table - one row per absence interval [departure, arrival)."""

    __tablename__ = "trip"
    __table_args__ = (Index("idx_trip_user_departure", "user_id", "departure"),)

    trip_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    departure: Mapped[date] = mapped_column(Date, nullable=False)
    arrival: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
