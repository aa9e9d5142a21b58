"""
Pytest fixtures for stores, the HTTP client and sample schedule data.

Each test gets a fresh in-memory SQLite database (aiosqlite); the schema is
created from the ORM metadata and thrown away with the engine.
"""

from datetime import datetime, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from dance_schedule.main import app
from dance_schedule.db.base import Base
from dance_schedule.db.session import get_db
from dance_schedule.domain import Event, EventWithOccurrences, Id, Location, Occurrence
from dance_schedule.services.actions import LocationActions
from dance_schedule.services.schedule_service import EventWithOccurrencesActions
from dance_schedule.store.memory_store import MemoryStore
from dance_schedule.store.sqlalchemy_store import SqlAlchemyStore

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh in-memory database shared by every session of one test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(params=["memory", "sqlalchemy"])
async def store(request, session_factory):
    """Every store-level test runs against both storage implementations."""
    if request.param == "memory":
        yield MemoryStore()
        return
    async with session_factory() as session:
        yield SqlAlchemyStore(session)


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests each get their own session on the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def tomorrow() -> datetime:
    """Tomorrow at 19:00 local time, safely inside the upcoming filter."""
    base = datetime.now().replace(hour=19, minute=0, second=0, microsecond=0)
    return base + timedelta(days=1)


@pytest_asyncio.fixture
async def ballroom(store) -> Id[Location]:
    return await LocationActions(store).create(
        Location(name="Ballsaal", address="Hauptstraße 1")
    )


@pytest_asyncio.fixture
async def social_dance(store, ballroom, tomorrow) -> Id[Event]:
    """An event with two occurrences at the ballroom."""
    return await EventWithOccurrencesActions(store).create(
        EventWithOccurrences(
            event=Event(
                title="Social Dance",
                teaser="Tanzen für alle",
                description="Offener Tanzabend mit DJ.",
            ),
            occurrences=(
                Occurrence(start=tomorrow, duration=180, location_id=ballroom),
                Occurrence(start=tomorrow + timedelta(days=7), duration=180, location_id=ballroom),
            ),
        )
    )
