"""SQLAlchemy implementation of the ScheduleStore.

Operates on one AsyncSession, i.e. one connection and one transaction per
request. Every SQLAlchemy failure surfaces as StorageError.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator
from uuid import UUID, uuid4

from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dance_schedule.core.errors import StorageError
from dance_schedule.core.logging import get_logger
from dance_schedule.core.metrics import record_storage_error, record_storage_operation
from dance_schedule.models import Event, Location, Occurrence
from dance_schedule.store.interfaces import EntityKind, Row, ScheduleStore
from dance_schedule.store.predicates import ALWAYS, Predicate

logger = get_logger(__name__)

TABLES: dict[EntityKind, Table] = {
    EntityKind.EVENTS: Event.__table__,
    EntityKind.LOCATIONS: Location.__table__,
    EntityKind.OCCURRENCES: Occurrence.__table__,
}


@asynccontextmanager
async def _translate_errors(operation: str) -> AsyncIterator[None]:
    try:
        yield
    except IntegrityError as e:
        record_storage_error(operation)
        logger.error("storage_integrity_error", operation=operation, error=str(e.orig))
        raise StorageError("Integrity constraint violated", operation) from e
    except OperationalError as e:
        record_storage_error(operation)
        logger.error("storage_operational_error", operation=operation, error=str(e.orig))
        raise StorageError("Connection or operational error", operation) from e
    except SQLAlchemyError as e:
        record_storage_error(operation)
        logger.error("storage_error", operation=operation, error=str(e))
        raise StorageError("Database operation failed", operation) from e


class SqlAlchemyStore(ScheduleStore):
    """Relational store backed by an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._depth = 0

    async def query(
        self,
        kind: EntityKind,
        predicate: Predicate = ALWAYS,
        order_by: str | None = None,
    ) -> list[Row]:
        table = TABLES[kind]
        statement = select(table).where(predicate.to_clause(table))
        if order_by is not None:
            statement = statement.order_by(table.c[order_by].asc())
        record_storage_operation("query", kind.value)
        async with _translate_errors("query"):
            result = await self._session.execute(statement)
        return [dict(row) for row in result.mappings().all()]

    async def insert(self, kind: EntityKind, row: Row) -> UUID:
        row_id = uuid4()
        record_storage_operation("insert", kind.value)
        async with _translate_errors("insert"):
            await self._session.execute(insert(TABLES[kind]).values(id=row_id, **row))
        return row_id

    async def update(self, kind: EntityKind, row_id: UUID, row: Row) -> int:
        table = TABLES[kind]
        record_storage_operation("update", kind.value)
        async with _translate_errors("update"):
            result = await self._session.execute(
                update(table).where(table.c.id == row_id).values(**row)
            )
        return result.rowcount

    async def delete(self, kind: EntityKind, predicate: Predicate) -> list[Row]:
        table = TABLES[kind]
        clause = predicate.to_clause(table)
        record_storage_operation("delete", kind.value)
        async with _translate_errors("delete"):
            removed = await self._session.execute(select(table).where(clause))
            rows = [dict(row) for row in removed.mappings().all()]
            if rows:
                await self._session.execute(delete(table).where(clause))
        return rows

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["SqlAlchemyStore"]:
        if self._depth:
            # Joins the enclosing unit of work; the outermost scope commits.
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
            return

        self._depth = 1
        try:
            yield self
        except BaseException:
            await self._session.rollback()
            raise
        else:
            try:
                async with _translate_errors("commit"):
                    await self._session.commit()
            except StorageError:
                await self._session.rollback()
                raise
        finally:
            self._depth = 0
