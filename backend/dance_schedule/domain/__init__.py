from dance_schedule.domain.filters import OccurrenceFilter
from dance_schedule.domain.ids import Id
from dance_schedule.domain.models import (
    Event,
    EventWithOccurrences,
    Location,
    LocationWithOccurrences,
    Occurrence,
    OccurrenceWithEvent,
    Overview,
)

__all__ = [
    "Id",
    "Event",
    "Location",
    "Occurrence",
    "OccurrenceWithEvent",
    "EventWithOccurrences",
    "LocationWithOccurrences",
    "Overview",
    "OccurrenceFilter",
]
