"""
Generic CRUD actions over the storage collaborator.

One EntityActions implementation serves every entity kind; what differs
per kind is a small EntityDescriptor (which table, how a domain value maps
to a row and back) and the delete hook:

- Locations are protected: a delete is rejected with DependencyError while
  any occurrence references the location.
- Events cascade: a delete removes the event's occurrences in the same
  transaction.
- Occurrences are created for an owning event, which must exist.

update() and delete() return the value as it was before the call.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from dance_schedule.core.errors import DependencyError, NotFoundError
from dance_schedule.core.logging import get_logger
from dance_schedule.core.metrics import record_delete_rejection
from dance_schedule.domain import Event, Id, Location, Occurrence
from dance_schedule.store.interfaces import EntityKind, Row, ScheduleStore
from dance_schedule.store.predicates import ALWAYS, Predicate, field

logger = get_logger(__name__)

T = TypeVar("T")
K = TypeVar("K")


@dataclass(frozen=True)
class EntityDescriptor(Generic[T]):
    kind: EntityKind
    name: str
    to_row: Callable[[T], Row]
    from_row: Callable[[Row], T]


LOCATION = EntityDescriptor[Location](
    kind=EntityKind.LOCATIONS,
    name="Location",
    to_row=lambda location: {"name": location.name, "address": location.address},
    from_row=lambda row: Location(name=row["name"], address=row["address"]),
)

EVENT = EntityDescriptor[Event](
    kind=EntityKind.EVENTS,
    name="Event",
    to_row=lambda event: {
        "title": event.title,
        "teaser": event.teaser,
        "description": event.description,
    },
    from_row=lambda row: Event(
        title=row["title"], teaser=row["teaser"], description=row["description"]
    ),
)


def occurrence_row(occurrence: Occurrence, event_id: Id[Event]) -> Row:
    return {
        "event_id": event_id.value,
        "start": occurrence.start,
        "duration": occurrence.duration,
        "location_id": occurrence.location_id.value,
    }


def occurrence_from_row(row: Row) -> Occurrence:
    return Occurrence(
        start=row["start"],
        duration=row["duration"],
        location_id=Id[Location](row["location_id"]),
    )


OCCURRENCE = EntityDescriptor[Occurrence](
    kind=EntityKind.OCCURRENCES,
    name="Occurrence",
    # event_id is fixed at creation; updates never move an occurrence
    to_row=lambda occurrence: {
        "start": occurrence.start,
        "duration": occurrence.duration,
        "location_id": occurrence.location_id.value,
    },
    from_row=occurrence_from_row,
)


@dataclass(frozen=True)
class OccurrenceRecord:
    """An occurrence as stored: its own id, its owning event and its value."""

    id: Id[Occurrence]
    event_id: Id[Event]
    occurrence: Occurrence

    @classmethod
    def from_row(cls, row: Row) -> "OccurrenceRecord":
        return cls(
            id=Id[Occurrence](row["id"]),
            event_id=Id[Event](row["event_id"]),
            occurrence=occurrence_from_row(row),
        )


async def load_occurrences(
    store: ScheduleStore,
    predicate: Predicate = ALWAYS,
    order_by: str | None = None,
) -> list[OccurrenceRecord]:
    rows = await store.query(EntityKind.OCCURRENCES, predicate, order_by=order_by)
    return [OccurrenceRecord.from_row(row) for row in rows]


def by_id(item_id: Id[Any]) -> Predicate:
    return field("id").eq(item_id.value)


class Actions(ABC, Generic[T, K]):
    """CRUD contract for values of type T addressed by Id[K].

    K is the entity kind the id belongs to. For a single-table entity it is
    T itself; a composite value is addressed by the id of its root entity.
    """

    @abstractmethod
    async def all(self) -> dict[Id[K], T]:
        ...

    @abstractmethod
    async def create(self, item: T) -> Id[K]:
        ...

    @abstractmethod
    async def read(self, item_id: Id[K]) -> T:
        """Raises NotFoundError if absent."""
        ...

    @abstractmethod
    async def update(self, item_id: Id[K], new_item: T) -> T:
        """Replace the stored value and return the previous one."""
        ...

    @abstractmethod
    async def delete(self, item_id: Id[K]) -> T:
        """Remove the value and return it."""
        ...


class EntityActions(Actions[T, T]):
    """Actions for a single-table entity, driven by its descriptor."""

    def __init__(self, store: ScheduleStore, descriptor: EntityDescriptor[T]) -> None:
        self._store = store
        self._descriptor = descriptor

    @property
    def _log_name(self) -> str:
        return self._descriptor.name.lower()

    async def all(self) -> dict[Id[T], T]:
        rows = await self._store.query(self._descriptor.kind)
        return {Id[T](row["id"]): self._descriptor.from_row(row) for row in rows}

    async def create(self, item: T) -> Id[T]:
        async with self._store.transaction():
            row_id = await self._store.insert(self._descriptor.kind, self._descriptor.to_row(item))
        logger.info(f"{self._log_name}_created", id=row_id)
        return Id[T](row_id)

    async def read(self, item_id: Id[T]) -> T:
        rows = await self._store.query(self._descriptor.kind, by_id(item_id))
        if not rows:
            raise NotFoundError(self._descriptor.name, item_id)
        return self._descriptor.from_row(rows[0])

    async def update(self, item_id: Id[T], new_item: T) -> T:
        async with self._store.transaction():
            previous = await self.read(item_id)
            await self._store.update(
                self._descriptor.kind, item_id.value, self._descriptor.to_row(new_item)
            )
        logger.info(f"{self._log_name}_updated", id=item_id)
        return previous

    async def delete(self, item_id: Id[T]) -> T:
        async with self._store.transaction():
            previous = await self.read(item_id)
            await self._before_delete(item_id)
            await self._store.delete(self._descriptor.kind, by_id(item_id))
        logger.info(f"{self._log_name}_deleted", id=item_id)
        return previous

    async def _before_delete(self, item_id: Id[T]) -> None:
        """Runs inside the delete transaction, after the target was found."""


class LocationActions(EntityActions[Location]):
    def __init__(self, store: ScheduleStore) -> None:
        super().__init__(store, LOCATION)

    async def _before_delete(self, item_id: Id[Location]) -> None:
        blockers = await load_occurrences(self._store, field("location_id").eq(item_id.value))
        if not blockers:
            return

        event_ids = list(dict.fromkeys(record.event_id for record in blockers))
        record_delete_rejection(EntityKind.LOCATIONS.value)
        logger.warning(
            "location_delete_rejected",
            location_id=item_id,
            occurrences=len(blockers),
            events=len(event_ids),
        )
        raise DependencyError(
            "Location",
            item_id,
            event_ids=event_ids,
            occurrence_ids=[record.id for record in blockers],
        )


class EventActions(EntityActions[Event]):
    def __init__(self, store: ScheduleStore) -> None:
        super().__init__(store, EVENT)

    async def _before_delete(self, item_id: Id[Event]) -> None:
        removed = await self._store.delete(
            EntityKind.OCCURRENCES, field("event_id").eq(item_id.value)
        )
        if removed:
            logger.info("event_occurrences_deleted", event_id=item_id, count=len(removed))


class OccurrenceActions(EntityActions[Occurrence]):
    """Occurrences addressed one at a time.

    An occurrence always belongs to an event, so create() takes the owning
    event's id and fails with NotFoundError when that event does not exist.
    The location is not checked: a dangling location reference is tolerated
    the same way the schedule views tolerate it.
    """

    def __init__(self, store: ScheduleStore) -> None:
        super().__init__(store, OCCURRENCE)

    async def create(self, item: Occurrence, event_id: Id[Event] | None = None) -> Id[Occurrence]:
        if event_id is None:
            raise TypeError("an occurrence is created for an event; pass event_id")
        async with self._store.transaction():
            await EventActions(self._store).read(event_id)
            row_id = await self._store.insert(EntityKind.OCCURRENCES, occurrence_row(item, event_id))
        logger.info("occurrence_created", id=row_id, event_id=event_id)
        return Id[Occurrence](row_id)

