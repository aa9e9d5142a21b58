"""
Event endpoints. An event is created, replaced and deleted together with
its occurrences; deleting an event deletes its occurrences.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from dance_schedule.api.dependencies import explicit_filter, get_store, upcoming_filter
from dance_schedule.domain import Event, Id, OccurrenceFilter
from dance_schedule.schemas import (
    EventResponse,
    EventWithOccurrencesCreate,
    EventWithOccurrencesResponse,
    IdResponse,
    OccurrenceCreate,
)
from dance_schedule.services.actions import OccurrenceActions
from dance_schedule.services.schedule_service import (
    EventWithOccurrencesActions,
    all_events_with_occurrences,
    read_event_with_occurrences,
    replace_occurrences,
)
from dance_schedule.store.interfaces import ScheduleStore

router = APIRouter(prefix="/events", tags=["Events"])


@router.get("/", response_model=dict[UUID, EventWithOccurrencesResponse])
async def list_events(
    occurrence_filter: OccurrenceFilter = Depends(upcoming_filter),
    store: ScheduleStore = Depends(get_store),
):
    """Every event with its occurrences. Defaults to upcoming occurrences."""
    events = await all_events_with_occurrences(store, occurrence_filter)
    return {
        event_id.value: EventWithOccurrencesResponse.from_domain(item)
        for event_id, item in events.items()
    }


@router.post("/", response_model=IdResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_data: EventWithOccurrencesCreate,
    store: ScheduleStore = Depends(get_store),
):
    event_id = await EventWithOccurrencesActions(store).create(event_data.to_domain())
    return IdResponse(id=event_id.value)


@router.get("/{event_id}", response_model=EventWithOccurrencesResponse)
async def get_event(
    event_id: str,
    occurrence_filter: OccurrenceFilter = Depends(upcoming_filter),
    store: ScheduleStore = Depends(get_store),
):
    item = await read_event_with_occurrences(
        store, Id[Event].from_string(event_id), occurrence_filter
    )
    return EventWithOccurrencesResponse.from_domain(item)


@router.put("/{event_id}", response_model=EventWithOccurrencesResponse)
async def update_event(
    event_id: str,
    event_data: EventWithOccurrencesCreate,
    store: ScheduleStore = Depends(get_store),
):
    """Replace an event and its whole occurrence set. Returns the previous state."""
    previous = await EventWithOccurrencesActions(store).update(
        Id[Event].from_string(event_id), event_data.to_domain()
    )
    return EventWithOccurrencesResponse.from_domain(previous)


@router.delete("/{event_id}", response_model=EventWithOccurrencesResponse)
async def delete_event(event_id: str, store: ScheduleStore = Depends(get_store)):
    removed = await EventWithOccurrencesActions(store).delete(Id[Event].from_string(event_id))
    return EventWithOccurrencesResponse.from_domain(removed)


@router.put("/{event_id}/occurrences", response_model=EventResponse)
async def replace_event_occurrences(
    event_id: str,
    occurrences: list[OccurrenceCreate],
    occurrence_filter: OccurrenceFilter = Depends(explicit_filter),
    store: ScheduleStore = Depends(get_store),
):
    """Replace the occurrences inside ?before=&after= (all of them when omitted)."""
    event = await replace_occurrences(
        store,
        Id[Event].from_string(event_id),
        [o.to_domain() for o in occurrences],
        occurrence_filter,
    )
    return EventResponse.from_domain(event)


@router.post(
    "/{event_id}/occurrences",
    response_model=IdResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_event_occurrence(
    event_id: str,
    occurrence_data: OccurrenceCreate,
    store: ScheduleStore = Depends(get_store),
):
    """Add one occurrence to an existing event."""
    occurrence_id = await OccurrenceActions(store).create(
        occurrence_data.to_domain(), event_id=Id[Event].from_string(event_id)
    )
    return IdResponse(id=occurrence_id.value)
