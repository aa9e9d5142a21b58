"""Storage collaborator interface (repository pattern).

The schedule core reads and writes plain rows through this interface and
never touches the ORM directly. Stores must be swappable: the SQLAlchemy
store backs the API, the in-memory store backs unit tests.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from enum import Enum
from typing import Any
from uuid import UUID

from dance_schedule.store.predicates import ALWAYS, Predicate

Row = dict[str, Any]


class EntityKind(str, Enum):
    EVENTS = "events"
    LOCATIONS = "locations"
    OCCURRENCES = "occurrences"


class ScheduleStore(ABC):
    """Interface for row persistence operations."""

    @abstractmethod
    async def query(
        self,
        kind: EntityKind,
        predicate: Predicate = ALWAYS,
        order_by: str | None = None,
    ) -> list[Row]:
        """Return matching rows, including their ``id``.

        Rows come back in ascending ``order_by`` order when given, otherwise
        in the store's natural (insertion) order.
        """
        ...

    @abstractmethod
    async def insert(self, kind: EntityKind, row: Row) -> UUID:
        """Persist a row under a freshly generated id and return the id."""
        ...

    @abstractmethod
    async def update(self, kind: EntityKind, row_id: UUID, row: Row) -> int:
        """Overwrite the given columns of one row. Returns the affected count."""
        ...

    @abstractmethod
    async def delete(self, kind: EntityKind, predicate: Predicate) -> list[Row]:
        """Remove matching rows and return them."""
        ...

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager["ScheduleStore"]:
        """Scope a unit of work.

        The outermost scope commits when the block exits normally and rolls
        back when it raises. Nested scopes join the enclosing transaction.
        """
        ...
