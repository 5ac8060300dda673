"""Exclusion constraint against overlapping active bookings.

Revision ID: 002_booking_overlap_exclusion
Revises: 001_initial
Create Date: 2026-02-09

Two pending/confirmed bookings of the same room may not share a night.
daterange(..., '[)') matches the application's half-open overlap check, so
a check-out day equal to the next check-in day is not a conflict.
"""

from typing import Sequence

from alembic import op

# revision identifiers
revision: str = "002_booking_overlap_exclusion"
down_revision: str | None = "001_initial"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # btree_gist provides the = operator for uuid inside a GiST index
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    op.execute(
        """
        ALTER TABLE bookings
        ADD CONSTRAINT bookings_no_active_overlap
        EXCLUDE USING gist (
            room_id WITH =,
            daterange(check_in, check_out, '[)') WITH &&
        )
        WHERE (status IN ('pending', 'confirmed'))
        """
    )


def downgrade() -> None:
    op.execute("ALTER TABLE bookings DROP CONSTRAINT IF EXISTS bookings_no_active_overlap")
