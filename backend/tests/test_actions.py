"""
Tests for the CRUD actions: round trips, previous-value returns and the
delete policies (events cascade, locations are protected).
"""

from datetime import datetime, timedelta
from typing import get_args
from uuid import uuid4

import pytest

from dance_schedule.core.errors import DependencyError, NotFoundError
from dance_schedule.domain import Event, EventWithOccurrences, Id, Location, Occurrence
from dance_schedule.services.actions import EventActions, LocationActions, OccurrenceActions
from dance_schedule.services.schedule_service import (
    EventWithOccurrencesActions,
    read_occurrence,
    read_occurrence_with_event,
)
from dance_schedule.store.interfaces import EntityKind


class TestLocationActions:

    @pytest.mark.asyncio
    async def test_create_then_read(self, store):
        actions = LocationActions(store)
        location_id = await actions.create(Location(name="Studio", address="Gasse 5"))

        assert await actions.read(location_id) == Location(name="Studio", address="Gasse 5")
        assert list((await actions.all()).keys()) == [location_id]

    @pytest.mark.asyncio
    async def test_read_unknown_raises_not_found(self, store):
        with pytest.raises(NotFoundError) as exc_info:
            await LocationActions(store).read(Id(uuid4()))
        assert exc_info.value.http_status == 404

    @pytest.mark.asyncio
    async def test_update_returns_previous_value(self, store, ballroom):
        actions = LocationActions(store)
        previous = await actions.update(ballroom, Location(name="Großer Saal", address="Hauptstraße 1"))

        assert previous.name == "Ballsaal"
        assert (await actions.read(ballroom)).name == "Großer Saal"

    @pytest.mark.asyncio
    async def test_update_unknown_raises_not_found(self, store):
        with pytest.raises(NotFoundError):
            await LocationActions(store).update(Id(uuid4()), Location(name="X", address=""))

    @pytest.mark.asyncio
    async def test_delete_unreferenced_location(self, store):
        actions = LocationActions(store)
        location_id = await actions.create(Location(name="Leer", address=""))

        removed = await actions.delete(location_id)

        assert removed.name == "Leer"
        with pytest.raises(NotFoundError):
            await actions.read(location_id)

    @pytest.mark.asyncio
    async def test_delete_referenced_location_is_rejected(self, store, ballroom, social_dance):
        actions = LocationActions(store)

        with pytest.raises(DependencyError) as exc_info:
            await actions.delete(ballroom)

        error = exc_info.value
        assert error.http_status == 409
        assert error.event_ids == [social_dance]
        assert len(error.occurrence_ids) == 2
        assert error.details["event_ids"] == [str(social_dance)]
        # location and occurrences are untouched
        assert (await actions.read(ballroom)).name == "Ballsaal"
        assert len(await store.query(EntityKind.OCCURRENCES)) == 2

    @pytest.mark.asyncio
    async def test_delete_succeeds_once_referencing_event_is_gone(
        self, store, ballroom, social_dance
    ):
        await EventWithOccurrencesActions(store).delete(social_dance)
        removed = await LocationActions(store).delete(ballroom)
        assert removed.name == "Ballsaal"


class TestEventActions:

    @pytest.mark.asyncio
    async def test_create_then_read(self, store):
        actions = EventActions(store)
        event = Event(title="Workshop", teaser="Lindy Hop", description="Für Anfänger")
        event_id = await actions.create(event)
        assert await actions.read(event_id) == event

    @pytest.mark.asyncio
    async def test_delete_cascades_occurrences(self, store, social_dance):
        occurrence_ids = [Id(row["id"]) for row in await store.query(EntityKind.OCCURRENCES)]

        removed = await EventActions(store).delete(social_dance)

        assert removed.title == "Social Dance"
        assert await store.query(EntityKind.OCCURRENCES) == []
        for occurrence_id in occurrence_ids:
            with pytest.raises(NotFoundError):
                await read_occurrence(store, occurrence_id)

    @pytest.mark.asyncio
    async def test_delete_unknown_raises_not_found(self, store):
        with pytest.raises(NotFoundError):
            await EventActions(store).delete(Id(uuid4()))


class TestEventWithOccurrencesActions:

    def test_addressed_by_event_id(self):
        assert get_args(EventWithOccurrencesActions.__orig_bases__[0]) == (
            EventWithOccurrences,
            Event,
        )

    @pytest.mark.asyncio
    async def test_created_id_is_an_event_id(self, store, social_dance):
        event = await EventActions(store).read(social_dance)
        assert event.title == "Social Dance"

    @pytest.mark.asyncio
    async def test_read_returns_event_and_occurrences(self, store, social_dance, ballroom, tomorrow):
        item = await EventWithOccurrencesActions(store).read(social_dance)

        assert item.event.title == "Social Dance"
        assert sorted(o.start for o in item.occurrences) == [tomorrow, tomorrow + timedelta(days=7)]
        assert all(o.location_id == ballroom for o in item.occurrences)

    @pytest.mark.asyncio
    async def test_update_replaces_whole_occurrence_set(self, store, social_dance, ballroom):
        actions = EventWithOccurrencesActions(store)
        new_start = datetime(2030, 1, 1, 20, 0)
        replacement = EventWithOccurrences(
            event=Event(title="Neujahrsball", teaser="", description=""),
            occurrences=(Occurrence(start=new_start, duration=240, location_id=ballroom),),
        )

        previous = await actions.update(social_dance, replacement)

        assert previous.event.title == "Social Dance"
        assert len(previous.occurrences) == 2
        assert await actions.read(social_dance) == replacement

    @pytest.mark.asyncio
    async def test_update_unknown_event_changes_nothing(self, store, social_dance):
        with pytest.raises(NotFoundError):
            await EventWithOccurrencesActions(store).update(
                Id(uuid4()), EventWithOccurrences(event=Event("X", "", ""))
            )
        assert len(await store.query(EntityKind.OCCURRENCES)) == 2

    @pytest.mark.asyncio
    async def test_delete_returns_previous_state(self, store, social_dance):
        actions = EventWithOccurrencesActions(store)
        removed = await actions.delete(social_dance)

        assert len(removed.occurrences) == 2
        assert await actions.all() == {}


class TestOccurrenceActions:

    @pytest.mark.asyncio
    async def test_create_attaches_to_event(self, store, social_dance, ballroom, tomorrow):
        actions = OccurrenceActions(store)
        extra = Occurrence(start=tomorrow + timedelta(days=14), duration=120, location_id=ballroom)

        occurrence_id = await actions.create(extra, event_id=social_dance)

        assert await actions.read(occurrence_id) == extra
        item = await EventWithOccurrencesActions(store).read(social_dance)
        assert extra in item.occurrences
        assert len(await actions.all()) == 3

    @pytest.mark.asyncio
    async def test_create_for_unknown_event_raises_not_found(self, store, ballroom, tomorrow):
        occurrence = Occurrence(start=tomorrow, duration=60, location_id=ballroom)

        with pytest.raises(NotFoundError):
            await OccurrenceActions(store).create(occurrence, event_id=Id(uuid4()))
        assert await store.query(EntityKind.OCCURRENCES) == []

    @pytest.mark.asyncio
    async def test_create_without_event_is_rejected(self, store, ballroom, tomorrow):
        with pytest.raises(TypeError):
            await OccurrenceActions(store).create(
                Occurrence(start=tomorrow, duration=60, location_id=ballroom)
            )

    @pytest.mark.asyncio
    async def test_update_returns_previous_value(self, store, social_dance, ballroom, tomorrow):
        actions = OccurrenceActions(store)
        occurrence_id = next(
            occurrence_id
            for occurrence_id, occurrence in (await actions.all()).items()
            if occurrence.start == tomorrow
        )
        moved = Occurrence(start=tomorrow + timedelta(hours=1), duration=90, location_id=ballroom)

        previous = await actions.update(occurrence_id, moved)

        assert previous == Occurrence(start=tomorrow, duration=180, location_id=ballroom)
        assert await actions.read(occurrence_id) == moved
        # still owned by the same event
        item = await read_occurrence_with_event(store, occurrence_id)
        assert item.event_id == social_dance

    @pytest.mark.asyncio
    async def test_update_unknown_raises_not_found(self, store, ballroom, tomorrow):
        with pytest.raises(NotFoundError):
            await OccurrenceActions(store).update(
                Id(uuid4()), Occurrence(start=tomorrow, duration=60, location_id=ballroom)
            )

    @pytest.mark.asyncio
    async def test_delete_returns_removed_value(self, store, social_dance, ballroom, tomorrow):
        actions = OccurrenceActions(store)
        occurrence_id = next(iter(await actions.all()))
        expected = await actions.read(occurrence_id)

        removed = await actions.delete(occurrence_id)

        assert removed == expected
        with pytest.raises(NotFoundError):
            await actions.read(occurrence_id)
        assert len((await EventWithOccurrencesActions(store).read(social_dance)).occurrences) == 1

    @pytest.mark.asyncio
    async def test_deleting_last_reference_frees_location(self, store, social_dance, ballroom):
        actions = OccurrenceActions(store)
        for occurrence_id in list(await actions.all()):
            await actions.delete(occurrence_id)

        removed = await LocationActions(store).delete(ballroom)
        assert removed.name == "Ballsaal"
