"""
Overview read-model: all locations plus every event with its occurrences.
"""

from dance_schedule.core.logging import get_logger
from dance_schedule.domain import OccurrenceFilter, Overview
from dance_schedule.services.actions import LocationActions
from dance_schedule.services.schedule_service import UNRESTRICTED, all_events_with_occurrences
from dance_schedule.store.interfaces import ScheduleStore

logger = get_logger(__name__)


async def read_all(
    store: ScheduleStore,
    occurrence_filter: OccurrenceFilter = UNRESTRICTED,
) -> Overview:
    """Snapshot of the whole schedule.

    Locations are never filtered; the filter only narrows each event's
    occurrences.
    """
    locations = await LocationActions(store).all()
    events = await all_events_with_occurrences(store, occurrence_filter)
    logger.info("overview_loaded", locations=len(locations), events=len(events))
    return Overview(locations=locations, events=events)
