"""Domain models for the schedule.

Pure value objects. Persistence rows live in dance_schedule/models (ORM) and
are converted by the entity descriptors in services/actions.py.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from dance_schedule.domain.ids import Id

MAX_DURATION = 2**32 - 1


@dataclass(frozen=True)
class Location:
    name: str
    address: str


@dataclass(frozen=True)
class Event:
    title: str
    teaser: str
    description: str


@dataclass(frozen=True)
class Occurrence:
    """A single dated instance of an Event at a Location. Duration is in minutes."""

    start: datetime
    duration: int
    location_id: Id[Location]

    def __post_init__(self) -> None:
        if not 0 <= self.duration <= MAX_DURATION:
            raise ValueError("Occurrence duration must be between 0 and 2^32-1 minutes")

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.duration)


@dataclass(frozen=True)
class OccurrenceWithEvent:
    """An occurrence paired with its owning event, the unit of the schedule view."""

    occurrence: Occurrence
    event: Event
    event_id: Id[Event] | None = None


@dataclass(frozen=True)
class EventWithOccurrences:
    event: Event
    occurrences: tuple[Occurrence, ...] = ()


@dataclass(frozen=True)
class LocationWithOccurrences:
    location: Location
    occurrences: dict[Id[Occurrence], Occurrence] = field(default_factory=dict)


@dataclass(frozen=True)
class Overview:
    locations: dict[Id[Location], Location] = field(default_factory=dict)
    events: dict[Id[Event], EventWithOccurrences] = field(default_factory=dict)
