"""Kind-tagged identifiers.

Id[Location] and Id[Event] share one runtime class and compare by their UUID
value only; the type parameter exists for the type checker, which rejects
passing an Id[Location] where an Id[Event] is expected.
"""

from dataclasses import dataclass
from typing import Generic, Self, TypeVar
from uuid import UUID

from dance_schedule.core.errors import InvalidIdFormatError

K = TypeVar("K")


@dataclass(frozen=True)
class Id(Generic[K]):
    """Unique identifier of an entity of kind K."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        try:
            return cls(value=UUID(value))
        except (ValueError, TypeError, AttributeError) as exc:
            raise InvalidIdFormatError(value) from exc

    def __str__(self) -> str:
        return str(self.value)
