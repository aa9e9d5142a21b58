"""
Occurrence model: one dated instance of an event at a location.

Key design decisions:
- `start` is a naive local timestamp; the schedule buckets by its calendar date
- Index on `start` for the date-range filters every listing applies
- Indexes on both foreign keys: event cascades and location dependency
  checks scan by them
"""

import uuid

from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship

from dance_schedule.db.base import Base, TimestampMixin


class Occurrence(Base, TimestampMixin):
    __tablename__ = "occurrences"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    event_id = Column(Uuid, ForeignKey("events.id"), nullable=False)
    start = Column(DateTime(timezone=False), nullable=False)
    duration = Column(BigInteger, nullable=False, default=0)  # minutes
    location_id = Column(Uuid, ForeignKey("locations.id"), nullable=False)

    event = relationship("Event", back_populates="occurrences", lazy="noload")
    location = relationship("Location", back_populates="occurrences", lazy="noload")

    __table_args__ = (
        CheckConstraint("duration >= 0", name="check_occurrence_duration_non_negative"),
        Index("ix_occurrences_start", "start"),
        Index("ix_occurrences_event_id", "event_id"),
        Index("ix_occurrences_location_id", "location_id"),
    )

    def __repr__(self) -> str:
        return f"<Occurrence(id={self.id}, event={self.event_id}, start={self.start})>"
