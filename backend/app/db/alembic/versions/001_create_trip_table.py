"""Create trip table

Revision ID: 001
Revises:
Create Date: 2025-11-06

One row per absence interval [departure, arrival) owned by a user.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create trip table."""
    op.create_table(
        "trip",
        sa.Column("trip_id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("departure", sa.Date(), nullable=False),
        sa.Column("arrival", sa.Date(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("idx_trip_user_departure", "trip", ["user_id", "departure"])


def downgrade() -> None:
    """Drop trip table."""
    op.drop_index("idx_trip_user_departure", table_name="trip")
    op.drop_table("trip")
