"""
Single-occurrence endpoints plus the read models: the date-bucketed
schedule and the overview snapshot. New occurrences are added through
their event (POST /events/{id}/occurrences).
"""

from fastapi import APIRouter, Depends

from dance_schedule.api.dependencies import get_store, upcoming_filter
from dance_schedule.domain import Id, Occurrence, OccurrenceFilter
from dance_schedule.schemas import (
    OccurrenceCreate,
    OccurrenceResponse,
    OccurrenceWithEventResponse,
    OverviewResponse,
    ScheduleDayResponse,
)
from dance_schedule.services.actions import OccurrenceActions
from dance_schedule.services.overview_service import read_all
from dance_schedule.services.schedule_service import (
    occurrences_by_date,
    read_occurrence_with_event,
)
from dance_schedule.store.interfaces import ScheduleStore

router = APIRouter(tags=["Schedule"])


@router.get("/occurrences/{occurrence_id}", response_model=OccurrenceWithEventResponse)
async def get_occurrence(occurrence_id: str, store: ScheduleStore = Depends(get_store)):
    item = await read_occurrence_with_event(store, Id[Occurrence].from_string(occurrence_id))
    return OccurrenceWithEventResponse.from_domain(item)


@router.put("/occurrences/{occurrence_id}", response_model=OccurrenceResponse)
async def update_occurrence(
    occurrence_id: str,
    occurrence_data: OccurrenceCreate,
    store: ScheduleStore = Depends(get_store),
):
    """Replace an occurrence's start, duration and location. Returns the previous value."""
    previous = await OccurrenceActions(store).update(
        Id[Occurrence].from_string(occurrence_id), occurrence_data.to_domain()
    )
    return OccurrenceResponse.from_domain(previous)


@router.delete("/occurrences/{occurrence_id}", response_model=OccurrenceResponse)
async def delete_occurrence(occurrence_id: str, store: ScheduleStore = Depends(get_store)):
    removed = await OccurrenceActions(store).delete(Id[Occurrence].from_string(occurrence_id))
    return OccurrenceResponse.from_domain(removed)


@router.get("/schedule", response_model=list[ScheduleDayResponse])
async def get_schedule(
    occurrence_filter: OccurrenceFilter = Depends(upcoming_filter),
    store: ScheduleStore = Depends(get_store),
):
    """Occurrences grouped by day, days and times ascending."""
    schedule = await occurrences_by_date(store, occurrence_filter)
    return [ScheduleDayResponse.from_domain(day, entries) for day, entries in schedule.items()]


@router.get("/overview", response_model=OverviewResponse)
async def get_overview(
    occurrence_filter: OccurrenceFilter = Depends(upcoming_filter),
    store: ScheduleStore = Depends(get_store),
):
    overview = await read_all(store, occurrence_filter)
    return OverviewResponse.from_domain(overview)
