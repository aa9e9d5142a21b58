"""Date-range filter applied to occurrences."""

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Callable, Mapping, Self

from dance_schedule.core.errors import (
    InvalidAfterDateError,
    InvalidBeforeDateError,
    InvalidRangeError,
)
from dance_schedule.store.predicates import ALWAYS, Predicate, field

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


@dataclass(frozen=True)
class OccurrenceFilter:
    """Exclusive bounds on an occurrence's start.

    An occurrence is included when its start lies strictly before ``before``
    and strictly after ``after``; an absent bound does not restrict. The
    default instance is unrestricted.

    Raises:
        InvalidRangeError: If both bounds are present and after >= before.
    """

    before: datetime | None = None
    after: datetime | None = None

    def __post_init__(self) -> None:
        if self.before is not None and self.after is not None and not self.after < self.before:
            raise InvalidRangeError(self.after, self.before)

    @classmethod
    def upcoming(cls, today: date | None = None) -> Self:
        """Occurrences starting after local midnight of today."""
        today = today or date.today()
        return cls(after=datetime.combine(today, time.min))

    @classmethod
    def from_query(
        cls,
        params: Mapping[str, str | None],
        default: Callable[[], Self] | None = None,
    ) -> Self:
        """Parse ``before``/``after`` query parameters.

        When both are absent, ``default()`` is returned if given, otherwise
        the unrestricted filter.
        """
        raw_before = params.get("before")
        raw_after = params.get("after")
        if raw_before is None and raw_after is None and default is not None:
            return default()

        before = _parse_bound(raw_before, InvalidBeforeDateError)
        after = _parse_bound(raw_after, InvalidAfterDateError)
        return cls(before=before, after=after)

    @property
    def is_unrestricted(self) -> bool:
        return self.before is None and self.after is None

    def applies(self, start: datetime) -> bool:
        return (self.before is None or start < self.before) and (
            self.after is None or start > self.after
        )

    def to_predicate(self, column: str = "start") -> Predicate:
        predicate: Predicate = ALWAYS
        if self.before is not None:
            predicate = predicate & field(column).lt(self.before)
        if self.after is not None:
            predicate = predicate & field(column).gt(self.after)
        return predicate

    def to_query(self) -> dict[str, str]:
        params = {}
        if self.before is not None:
            params["before"] = self.before.strftime(TIMESTAMP_FORMAT)
        if self.after is not None:
            params["after"] = self.after.strftime(TIMESTAMP_FORMAT)
        return params


def _parse_bound(raw: str | None, error: type[Exception]) -> datetime | None:
    if raw is None:
        return None
    try:
        return datetime.strptime(raw, TIMESTAMP_FORMAT)
    except (ValueError, TypeError) as exc:
        raise error(raw) from exc
