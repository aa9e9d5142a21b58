"""
Pydantic schemas for event-related request/response validation.
"""

from pydantic import BaseModel, Field

from dance_schedule.domain import Event


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    teaser: str = Field("", max_length=1000)
    description: str = ""

    def to_domain(self) -> Event:
        return Event(title=self.title, teaser=self.teaser, description=self.description)


class EventResponse(BaseModel):
    title: str
    teaser: str
    description: str

    @classmethod
    def from_domain(cls, event: Event) -> "EventResponse":
        return cls(title=event.title, teaser=event.teaser, description=event.description)
