"""
Location model: a venue occurrences take place at.

Locations are never cascaded: the occurrences foreign key has no ON DELETE
action, and the service layer rejects deletes while occurrences reference
the row.
"""

import uuid

from sqlalchemy import Column, String, Uuid
from sqlalchemy.orm import relationship

from dance_schedule.db.base import Base, TimestampMixin


class Location(Base, TimestampMixin):
    __tablename__ = "locations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    address = Column(String(1000), nullable=False, default="")

    occurrences = relationship("Occurrence", back_populates="location", lazy="noload")

    def __repr__(self) -> str:
        return f"<Location(id={self.id}, name={self.name})>"
