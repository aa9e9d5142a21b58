"""
Request-scoped dependencies: one store per request, and the occurrence
filter parsed from the query string.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from dance_schedule.db.session import get_db
from dance_schedule.domain import OccurrenceFilter
from dance_schedule.store.interfaces import ScheduleStore
from dance_schedule.store.sqlalchemy_store import SqlAlchemyStore


async def get_store(db: AsyncSession = Depends(get_db)) -> ScheduleStore:
    return SqlAlchemyStore(db)


async def upcoming_filter(request: Request) -> OccurrenceFilter:
    """Filter from ?before=&after=, falling back to upcoming occurrences when both are absent."""
    return OccurrenceFilter.from_query(request.query_params, default=OccurrenceFilter.upcoming)


async def explicit_filter(request: Request) -> OccurrenceFilter:
    """Filter from ?before=&after=; unrestricted when both are absent."""
    return OccurrenceFilter.from_query(request.query_params)
