"""In-memory implementation of the ScheduleStore.

Rows live in insertion-ordered dicts. A transaction snapshots every table on
entry and restores the snapshot if the block raises.
"""

import copy
from contextlib import asynccontextmanager
from typing import AsyncIterator
from uuid import UUID, uuid4

from dance_schedule.core.metrics import record_storage_operation
from dance_schedule.store.interfaces import EntityKind, Row, ScheduleStore
from dance_schedule.store.predicates import ALWAYS, Predicate


class MemoryStore(ScheduleStore):
    def __init__(self) -> None:
        self._tables: dict[EntityKind, dict[UUID, Row]] = {kind: {} for kind in EntityKind}
        self._depth = 0

    async def query(
        self,
        kind: EntityKind,
        predicate: Predicate = ALWAYS,
        order_by: str | None = None,
    ) -> list[Row]:
        record_storage_operation("query", kind.value)
        rows = [dict(row) for row in self._tables[kind].values() if predicate.matches(row)]
        if order_by is not None:
            rows.sort(key=lambda row: row[order_by])
        return rows

    async def insert(self, kind: EntityKind, row: Row) -> UUID:
        record_storage_operation("insert", kind.value)
        row_id = uuid4()
        self._tables[kind][row_id] = {**row, "id": row_id}
        return row_id

    async def update(self, kind: EntityKind, row_id: UUID, row: Row) -> int:
        record_storage_operation("update", kind.value)
        current = self._tables[kind].get(row_id)
        if current is None:
            return 0
        current.update(row)
        current["id"] = row_id
        return 1

    async def delete(self, kind: EntityKind, predicate: Predicate) -> list[Row]:
        record_storage_operation("delete", kind.value)
        table = self._tables[kind]
        removed = [row_id for row_id, row in table.items() if predicate.matches(row)]
        return [table.pop(row_id) for row_id in removed]

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["MemoryStore"]:
        if self._depth:
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
            return

        snapshot = copy.deepcopy(self._tables)
        self._depth = 1
        try:
            yield self
        except BaseException:
            self._tables = snapshot
            raise
        finally:
            self._depth = 0
