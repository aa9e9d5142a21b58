"""
Location endpoints. Deleting a location that occurrences still reference
answers 409 with the blocking event and occurrence ids.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from dance_schedule.api.dependencies import get_store, upcoming_filter
from dance_schedule.domain import Id, Location, OccurrenceFilter
from dance_schedule.schemas import (
    IdResponse,
    LocationCreate,
    LocationResponse,
    LocationWithOccurrencesResponse,
)
from dance_schedule.services.actions import LocationActions
from dance_schedule.services.schedule_service import locations_with_occurrences
from dance_schedule.store.interfaces import ScheduleStore

router = APIRouter(prefix="/locations", tags=["Locations"])


@router.get("/", response_model=dict[UUID, LocationResponse])
async def list_locations(store: ScheduleStore = Depends(get_store)):
    locations = await LocationActions(store).all()
    return {
        location_id.value: LocationResponse.from_domain(location)
        for location_id, location in locations.items()
    }


@router.post("/", response_model=IdResponse, status_code=status.HTTP_201_CREATED)
async def create_location(
    location_data: LocationCreate,
    store: ScheduleStore = Depends(get_store),
):
    location_id = await LocationActions(store).create(location_data.to_domain())
    return IdResponse(id=location_id.value)


@router.get("/occurrences", response_model=dict[UUID, LocationWithOccurrencesResponse])
async def list_locations_with_occurrences(
    occurrence_filter: OccurrenceFilter = Depends(upcoming_filter),
    store: ScheduleStore = Depends(get_store),
):
    """Every location with the occurrences taking place there."""
    items = await locations_with_occurrences(store, occurrence_filter)
    return {
        location_id.value: LocationWithOccurrencesResponse.from_domain(item)
        for location_id, item in items.items()
    }


@router.get("/{location_id}", response_model=LocationResponse)
async def get_location(location_id: str, store: ScheduleStore = Depends(get_store)):
    location = await LocationActions(store).read(Id[Location].from_string(location_id))
    return LocationResponse.from_domain(location)


@router.put("/{location_id}", response_model=LocationResponse)
async def update_location(
    location_id: str,
    location_data: LocationCreate,
    store: ScheduleStore = Depends(get_store),
):
    """Replace a location. Returns the location as it was before the update."""
    previous = await LocationActions(store).update(
        Id[Location].from_string(location_id), location_data.to_domain()
    )
    return LocationResponse.from_domain(previous)


@router.delete("/{location_id}", response_model=LocationResponse)
async def delete_location(location_id: str, store: ScheduleStore = Depends(get_store)):
    removed = await LocationActions(store).delete(Id[Location].from_string(location_id))
    return LocationResponse.from_domain(removed)
