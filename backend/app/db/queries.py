"""Tenancy-safe query helpers."""

from sqlalchemy import Select, select

from backend.app.db.context import RequestContext
from backend.app.db.models import Trip


def select_trips(ctx: RequestContext) -> Select[tuple[Trip]]:
    """Select trip rows with user scoping enforced.

    Args:
        ctx: Request context with user_id

    Returns:
        Select statement filtered by user_id
    """
    return select(Trip).where(Trip.user_id == ctx.user_id)
