"""
Pydantic schemas for the composite read-models: events with occurrences,
the date-bucketed schedule and the overview.
"""

from datetime import date
from uuid import UUID
from pydantic import BaseModel

from dance_schedule.domain import EventWithOccurrences, Overview, OccurrenceWithEvent
from dance_schedule.schemas.event import EventCreate, EventResponse
from dance_schedule.schemas.location import LocationResponse
from dance_schedule.schemas.occurrence import (
    OccurrenceCreate,
    OccurrenceResponse,
    OccurrenceWithEventResponse,
)


class IdResponse(BaseModel):
    id: UUID


class EventWithOccurrencesCreate(BaseModel):
    event: EventCreate
    occurrences: list[OccurrenceCreate] = []

    def to_domain(self) -> EventWithOccurrences:
        return EventWithOccurrences(
            event=self.event.to_domain(),
            occurrences=tuple(o.to_domain() for o in self.occurrences),
        )


class EventWithOccurrencesResponse(BaseModel):
    event: EventResponse
    occurrences: list[OccurrenceResponse]

    @classmethod
    def from_domain(cls, item: EventWithOccurrences) -> "EventWithOccurrencesResponse":
        return cls(
            event=EventResponse.from_domain(item.event),
            occurrences=[OccurrenceResponse.from_domain(o) for o in item.occurrences],
        )


class ScheduleDayResponse(BaseModel):
    day: date
    occurrences: list[OccurrenceWithEventResponse]

    @classmethod
    def from_domain(cls, day: date, entries: list[OccurrenceWithEvent]) -> "ScheduleDayResponse":
        return cls(
            day=day,
            occurrences=[OccurrenceWithEventResponse.from_domain(e) for e in entries],
        )


class OverviewResponse(BaseModel):
    locations: dict[UUID, LocationResponse]
    events: dict[UUID, EventWithOccurrencesResponse]

    @classmethod
    def from_domain(cls, overview: Overview) -> "OverviewResponse":
        return cls(
            locations={
                location_id.value: LocationResponse.from_domain(location)
                for location_id, location in overview.locations.items()
            },
            events={
                event_id.value: EventWithOccurrencesResponse.from_domain(item)
                for event_id, item in overview.events.items()
            },
        )
