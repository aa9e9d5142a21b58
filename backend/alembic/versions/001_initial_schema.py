"""Initial schema: locations, events, occurrences with UUID keys and indexes.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "locations",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.String(1000), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "events",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("teaser", sa.String(1000), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        *_timestamps(),
    )

    # No ON DELETE actions: event deletes remove occurrences explicitly in the
    # same transaction, location deletes are refused while referenced.
    op.create_table(
        "occurrences",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("event_id", sa.Uuid(), sa.ForeignKey("events.id"), nullable=False),
        sa.Column("start", sa.DateTime(timezone=False), nullable=False),
        sa.Column("duration", sa.BigInteger(), nullable=False, server_default=sa.text("0")),
        sa.Column("location_id", sa.Uuid(), sa.ForeignKey("locations.id"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("duration >= 0", name="check_occurrence_duration_non_negative"),
    )
    # Every listing filters on start; the schedule also orders by it.
    op.create_index("ix_occurrences_start", "occurrences", ["start"])
    op.create_index("ix_occurrences_event_id", "occurrences", ["event_id"])
    op.create_index("ix_occurrences_location_id", "occurrences", ["location_id"])


def downgrade() -> None:
    op.drop_table("occurrences")
    op.drop_table("events")
    op.drop_table("locations")
