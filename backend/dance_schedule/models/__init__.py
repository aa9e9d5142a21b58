from dance_schedule.models.event import Event
from dance_schedule.models.location import Location
from dance_schedule.models.occurrence import Occurrence

__all__ = ["Event", "Location", "Occurrence"]
