"""
Event model. An event owns its occurrences; deleting an event deletes them
inside the same transaction (see services/actions.py).
"""

import uuid

from sqlalchemy import Column, String, Text, Uuid
from sqlalchemy.orm import relationship

from dance_schedule.db.base import Base, TimestampMixin


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    teaser = Column(String(1000), nullable=False, default="")
    description = Column(Text, nullable=False, default="")

    occurrences = relationship("Occurrence", back_populates="event", lazy="noload")

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title})>"
