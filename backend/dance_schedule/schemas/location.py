"""
Pydantic schemas for location request/response validation.
"""

from uuid import UUID
from pydantic import BaseModel, Field

from dance_schedule.domain import Location, LocationWithOccurrences
from dance_schedule.schemas.occurrence import OccurrenceResponse


class LocationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    address: str = Field("", max_length=1000)

    def to_domain(self) -> Location:
        return Location(name=self.name, address=self.address)


class LocationResponse(BaseModel):
    name: str
    address: str

    @classmethod
    def from_domain(cls, location: Location) -> "LocationResponse":
        return cls(name=location.name, address=location.address)


class LocationWithOccurrencesResponse(BaseModel):
    location: LocationResponse
    occurrences: dict[UUID, OccurrenceResponse]

    @classmethod
    def from_domain(cls, item: LocationWithOccurrences) -> "LocationWithOccurrencesResponse":
        return cls(
            location=LocationResponse.from_domain(item.location),
            occurrences={
                occurrence_id.value: OccurrenceResponse.from_domain(occurrence)
                for occurrence_id, occurrence in item.occurrences.items()
            },
        )
