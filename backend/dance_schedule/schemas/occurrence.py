"""
Pydantic schemas for occurrences. The wire shape is flat: the occurrence's
own fields plus its location_id.
"""

from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field

from dance_schedule.domain import Id, Occurrence, OccurrenceWithEvent
from dance_schedule.domain.models import MAX_DURATION
from dance_schedule.schemas.event import EventResponse


class OccurrenceCreate(BaseModel):
    start: datetime
    duration: int = Field(..., ge=0, le=MAX_DURATION, description="Minutes")
    location_id: UUID

    def to_domain(self) -> Occurrence:
        return Occurrence(
            start=self.start.replace(tzinfo=None),
            duration=self.duration,
            location_id=Id(self.location_id),
        )


class OccurrenceResponse(BaseModel):
    start: datetime
    end: datetime
    duration: int
    location_id: UUID

    @classmethod
    def from_domain(cls, occurrence: Occurrence) -> "OccurrenceResponse":
        return cls(
            start=occurrence.start,
            end=occurrence.end,
            duration=occurrence.duration,
            location_id=occurrence.location_id.value,
        )


class OccurrenceWithEventResponse(BaseModel):
    occurrence: OccurrenceResponse
    event: EventResponse
    event_id: UUID | None = None

    @classmethod
    def from_domain(cls, item: OccurrenceWithEvent) -> "OccurrenceWithEventResponse":
        return cls(
            occurrence=OccurrenceResponse.from_domain(item.occurrence),
            event=EventResponse.from_domain(item.event),
            event_id=item.event_id.value if item.event_id else None,
        )
