"""
Aggregation engine: filtered composite views over events, occurrences and
locations.

Every call re-reads from the store; nothing is cached between calls.
Occurrences whose location no longer exists are kept as they are: resolving
a location is the presentation layer's concern, and one dangling reference
never fails a whole read.
"""

from datetime import date
from typing import Iterable

from dance_schedule.core.errors import NotFoundError
from dance_schedule.core.logging import get_logger
from dance_schedule.core.metrics import time_aggregation
from dance_schedule.domain import (
    Event,
    EventWithOccurrences,
    Id,
    Location,
    LocationWithOccurrences,
    Occurrence,
    OccurrenceFilter,
    OccurrenceWithEvent,
)
from dance_schedule.services.actions import (
    EVENT,
    Actions,
    EventActions,
    LocationActions,
    OccurrenceActions,
    by_id,
    load_occurrences,
    occurrence_row,
)
from dance_schedule.store.interfaces import EntityKind, ScheduleStore
from dance_schedule.store.predicates import field

logger = get_logger(__name__)

UNRESTRICTED = OccurrenceFilter()


async def all_events_with_occurrences(
    store: ScheduleStore,
    occurrence_filter: OccurrenceFilter = UNRESTRICTED,
) -> dict[Id[Event], EventWithOccurrences]:
    """Every event with its occurrences matching the filter.

    Events without matching occurrences are still present, with an empty
    occurrence list. Occurrences keep the store's query order.
    """
    with time_aggregation("events_with_occurrences"):
        event_rows = await store.query(EntityKind.EVENTS)
        records = await load_occurrences(store, occurrence_filter.to_predicate())

        grouped: dict[Id[Event], list[Occurrence]] = {
            Id[Event](row["id"]): [] for row in event_rows
        }
        for record in records:
            if record.event_id in grouped:
                grouped[record.event_id].append(record.occurrence)

        result = {
            Id[Event](row["id"]): EventWithOccurrences(
                event=EVENT.from_row(row),
                occurrences=tuple(grouped[Id[Event](row["id"])]),
            )
            for row in event_rows
        }

    logger.debug(
        "events_with_occurrences_loaded",
        events=len(result),
        occurrences=len(records),
        **occurrence_filter.to_query(),
    )
    return result


async def read_event_with_occurrences(
    store: ScheduleStore,
    event_id: Id[Event],
    occurrence_filter: OccurrenceFilter = UNRESTRICTED,
) -> EventWithOccurrences:
    """One event with its matching occurrences. Raises NotFoundError."""
    event = await EventActions(store).read(event_id)
    records = await load_occurrences(
        store, field("event_id").eq(event_id.value) & occurrence_filter.to_predicate()
    )
    return EventWithOccurrences(
        event=event,
        occurrences=tuple(record.occurrence for record in records),
    )


async def locations_with_occurrences(
    store: ScheduleStore,
    occurrence_filter: OccurrenceFilter = UNRESTRICTED,
) -> dict[Id[Location], LocationWithOccurrences]:
    """Every location with the matching occurrences that reference it, keyed by occurrence id."""
    with time_aggregation("locations_with_occurrences"):
        locations = await LocationActions(store).all()
        records = await load_occurrences(store, occurrence_filter.to_predicate())

        grouped: dict[Id[Location], dict[Id[Occurrence], Occurrence]] = {
            location_id: {} for location_id in locations
        }
        for record in records:
            bucket = grouped.get(record.occurrence.location_id)
            if bucket is not None:
                bucket[record.id] = record.occurrence

    return {
        location_id: LocationWithOccurrences(location=location, occurrences=grouped[location_id])
        for location_id, location in locations.items()
    }


async def occurrences_by_date(
    store: ScheduleStore,
    occurrence_filter: OccurrenceFilter = UNRESTRICTED,
) -> dict[date, list[OccurrenceWithEvent]]:
    """The schedule: matching occurrences bucketed by the calendar date of their start.

    Dates are in ascending order; within a date, occurrences are in
    ascending start order.
    """
    with time_aggregation("occurrences_by_date"):
        records = await load_occurrences(store, occurrence_filter.to_predicate(), order_by="start")
        records.sort(key=lambda record: record.occurrence.start)

        event_ids = {record.event_id.value for record in records}
        event_rows = await store.query(EntityKind.EVENTS, field("id").in_(event_ids))
        events = {Id[Event](row["id"]): EVENT.from_row(row) for row in event_rows}

        schedule: dict[date, list[OccurrenceWithEvent]] = {}
        for record in records:
            event = events.get(record.event_id)
            if event is None:
                logger.warning(
                    "occurrence_without_event",
                    occurrence_id=record.id,
                    event_id=record.event_id,
                )
                continue
            schedule.setdefault(record.occurrence.start.date(), []).append(
                OccurrenceWithEvent(
                    occurrence=record.occurrence, event=event, event_id=record.event_id
                )
            )

    return dict(sorted(schedule.items()))


async def read_occurrence(store: ScheduleStore, occurrence_id: Id[Occurrence]) -> Occurrence:
    return await OccurrenceActions(store).read(occurrence_id)


async def read_occurrence_with_event(
    store: ScheduleStore, occurrence_id: Id[Occurrence]
) -> OccurrenceWithEvent:
    records = await load_occurrences(store, by_id(occurrence_id))
    if not records:
        raise NotFoundError("Occurrence", occurrence_id)
    record = records[0]
    event = await EventActions(store).read(record.event_id)
    return OccurrenceWithEvent(
        occurrence=record.occurrence, event=event, event_id=record.event_id
    )


async def replace_occurrences(
    store: ScheduleStore,
    event_id: Id[Event],
    new_occurrences: list[Occurrence],
    occurrence_filter: OccurrenceFilter = UNRESTRICTED,
) -> Event:
    """Swap the event's occurrences inside the filter window for new ones, atomically."""
    async with store.transaction():
        event = await EventActions(store).read(event_id)
        removed = await store.delete(
            EntityKind.OCCURRENCES,
            field("event_id").eq(event_id.value) & occurrence_filter.to_predicate(),
        )
        for occurrence in new_occurrences:
            await store.insert(EntityKind.OCCURRENCES, occurrence_row(occurrence, event_id))

    logger.info(
        "occurrences_replaced",
        event_id=event_id,
        removed=len(removed),
        inserted=len(new_occurrences),
    )
    return event


class EventWithOccurrencesActions(Actions[EventWithOccurrences, Event]):
    """CRUD for an event together with its whole occurrence set.

    The composite is addressed by its event's id. Each write runs in one
    transaction: the event row and its occurrence rows are committed
    together or not at all.
    """

    def __init__(self, store: ScheduleStore) -> None:
        self._store = store
        self._events = EventActions(store)

    async def all(self) -> dict[Id[Event], EventWithOccurrences]:
        return await all_events_with_occurrences(self._store)

    async def create(self, item: EventWithOccurrences) -> Id[Event]:
        async with self._store.transaction():
            event_id = await self._events.create(item.event)
            await self._insert_occurrences(event_id, item.occurrences)
        logger.info(
            "event_with_occurrences_created",
            event_id=event_id,
            occurrences=len(item.occurrences),
        )
        return event_id

    async def read(self, item_id: Id[Event]) -> EventWithOccurrences:
        return await read_event_with_occurrences(self._store, item_id)

    async def update(
        self, item_id: Id[Event], new_item: EventWithOccurrences
    ) -> EventWithOccurrences:
        async with self._store.transaction():
            previous = await self.read(item_id)
            await self._events.update(item_id, new_item.event)
            await self._store.delete(EntityKind.OCCURRENCES, field("event_id").eq(item_id.value))
            await self._insert_occurrences(item_id, new_item.occurrences)
        return previous

    async def delete(self, item_id: Id[Event]) -> EventWithOccurrences:
        async with self._store.transaction():
            previous = await self.read(item_id)
            await self._events.delete(item_id)
        return previous

    async def _insert_occurrences(
        self, event_id: Id[Event], occurrences: Iterable[Occurrence]
    ) -> None:
        for occurrence in occurrences:
            await self._store.insert(EntityKind.OCCURRENCES, occurrence_row(occurrence, event_id))
