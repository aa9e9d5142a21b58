"""
Tests for the storage collaborator: predicates, row operations and
transaction scoping, run against both store implementations.
"""

from datetime import datetime
from uuid import uuid4

import pytest

from dance_schedule.core.errors import StorageError
from dance_schedule.store.interfaces import EntityKind
from dance_schedule.store.predicates import ALWAYS, field
from dance_schedule.store.sqlalchemy_store import SqlAlchemyStore


def test_predicates_combine_with_and():
    predicate = field("a").gt(1) & field("a").lt(5) & ALWAYS
    assert predicate.matches({"a": 3})
    assert not predicate.matches({"a": 5})
    assert (ALWAYS & field("a").eq(2)) == field("a").eq(2)


def test_in_predicate():
    predicate = field("id").in_([1, 2])
    assert predicate.matches({"id": 2})
    assert not predicate.matches({"id": 3})


@pytest.mark.asyncio
async def test_insert_generates_distinct_ids(store):
    first = await store.insert(EntityKind.LOCATIONS, {"name": "A", "address": "a"})
    second = await store.insert(EntityKind.LOCATIONS, {"name": "B", "address": "b"})
    assert first != second

    rows = await store.query(EntityKind.LOCATIONS, field("id").eq(second))
    assert [(row["id"], row["name"]) for row in rows] == [(second, "B")]


@pytest.mark.asyncio
async def test_query_orders_by_column(store):
    event_id = await store.insert(EntityKind.EVENTS, {"title": "T", "teaser": "", "description": ""})
    location_id = uuid4()
    for hour in (20, 18, 19):
        await store.insert(
            EntityKind.OCCURRENCES,
            {
                "event_id": event_id,
                "start": datetime(2024, 6, 1, hour),
                "duration": 60,
                "location_id": location_id,
            },
        )

    rows = await store.query(EntityKind.OCCURRENCES, order_by="start")
    assert [row["start"].hour for row in rows] == [18, 19, 20]


@pytest.mark.asyncio
async def test_update_reports_affected_rows(store):
    row_id = await store.insert(EntityKind.LOCATIONS, {"name": "A", "address": "a"})
    assert await store.update(EntityKind.LOCATIONS, row_id, {"name": "B", "address": "b"}) == 1
    assert await store.update(EntityKind.LOCATIONS, uuid4(), {"name": "C", "address": "c"}) == 0

    rows = await store.query(EntityKind.LOCATIONS)
    assert rows[0]["name"] == "B"


@pytest.mark.asyncio
async def test_delete_returns_removed_rows(store):
    keep = await store.insert(EntityKind.LOCATIONS, {"name": "keep", "address": ""})
    drop = await store.insert(EntityKind.LOCATIONS, {"name": "drop", "address": ""})

    removed = await store.delete(EntityKind.LOCATIONS, field("id").eq(drop))
    assert [row["name"] for row in removed] == ["drop"]
    assert [row["id"] for row in await store.query(EntityKind.LOCATIONS)] == [keep]


@pytest.mark.asyncio
async def test_transaction_rolls_back_on_error(store):
    async with store.transaction():
        existing = await store.insert(EntityKind.LOCATIONS, {"name": "existing", "address": ""})

    with pytest.raises(RuntimeError):
        async with store.transaction():
            await store.insert(EntityKind.LOCATIONS, {"name": "new", "address": ""})
            await store.delete(EntityKind.LOCATIONS, field("id").eq(existing))
            raise RuntimeError("abort")

    rows = await store.query(EntityKind.LOCATIONS)
    assert [row["name"] for row in rows] == ["existing"]


@pytest.mark.asyncio
async def test_nested_transaction_joins_outer(store):
    with pytest.raises(RuntimeError):
        async with store.transaction():
            async with store.transaction():
                await store.insert(EntityKind.LOCATIONS, {"name": "inner", "address": ""})
            raise RuntimeError("abort outer")

    assert await store.query(EntityKind.LOCATIONS) == []


@pytest.mark.asyncio
async def test_constraint_violation_raises_storage_error(db_session):
    store = SqlAlchemyStore(db_session)
    with pytest.raises(StorageError) as exc_info:
        async with store.transaction():
            # start is NOT NULL
            await store.insert(
                EntityKind.OCCURRENCES,
                {"event_id": uuid4(), "start": None, "duration": 0, "location_id": uuid4()},
            )
    assert exc_info.value.operation == "insert"
    assert exc_info.value.http_status == 503
