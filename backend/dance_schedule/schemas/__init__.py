from dance_schedule.schemas.event import EventCreate, EventResponse
from dance_schedule.schemas.location import (
    LocationCreate,
    LocationResponse,
    LocationWithOccurrencesResponse,
)
from dance_schedule.schemas.occurrence import (
    OccurrenceCreate,
    OccurrenceResponse,
    OccurrenceWithEventResponse,
)
from dance_schedule.schemas.schedule import (
    EventWithOccurrencesCreate,
    EventWithOccurrencesResponse,
    IdResponse,
    OverviewResponse,
    ScheduleDayResponse,
)

__all__ = [
    "EventCreate", "EventResponse",
    "LocationCreate", "LocationResponse", "LocationWithOccurrencesResponse",
    "OccurrenceCreate", "OccurrenceResponse", "OccurrenceWithEventResponse",
    "EventWithOccurrencesCreate", "EventWithOccurrencesResponse",
    "IdResponse", "OverviewResponse", "ScheduleDayResponse",
]
