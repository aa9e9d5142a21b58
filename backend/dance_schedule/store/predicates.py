"""Composable row predicates.

A predicate is built from typed field comparisons joined with ``&`` and can
be evaluated against an in-memory row (``matches``) or translated into a
SQLAlchemy boolean clause for a table (``to_clause``):

    predicate = field("event_id").eq(event_id) & field("start").gt(after)
"""

import operator
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from sqlalchemy import Table, and_, true
from sqlalchemy.sql.elements import ColumnElement

Row = Mapping[str, Any]


class Predicate:
    def matches(self, row: Row) -> bool:
        raise NotImplementedError

    def to_clause(self, table: Table) -> ColumnElement[bool]:
        raise NotImplementedError

    def __and__(self, other: "Predicate") -> "Predicate":
        if isinstance(other, Always):
            return self
        if isinstance(self, Always):
            return other
        left = self.parts if isinstance(self, And) else (self,)
        right = other.parts if isinstance(other, And) else (other,)
        return And(left + right)


@dataclass(frozen=True)
class Always(Predicate):
    def matches(self, row: Row) -> bool:
        return True

    def to_clause(self, table: Table) -> ColumnElement[bool]:
        return true()


ALWAYS = Always()


_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "eq": operator.eq,
    "lt": operator.lt,
    "gt": operator.gt,
}


@dataclass(frozen=True)
class Compare(Predicate):
    name: str
    op: str
    value: Any

    def matches(self, row: Row) -> bool:
        return _OPERATORS[self.op](row[self.name], self.value)

    def to_clause(self, table: Table) -> ColumnElement[bool]:
        column = table.c[self.name]
        if self.op == "eq":
            return column == self.value
        if self.op == "lt":
            return column < self.value
        return column > self.value


@dataclass(frozen=True)
class In(Predicate):
    name: str
    values: frozenset

    def matches(self, row: Row) -> bool:
        return row[self.name] in self.values

    def to_clause(self, table: Table) -> ColumnElement[bool]:
        return table.c[self.name].in_(list(self.values))


@dataclass(frozen=True)
class And(Predicate):
    parts: tuple[Predicate, ...]

    def matches(self, row: Row) -> bool:
        return all(part.matches(row) for part in self.parts)

    def to_clause(self, table: Table) -> ColumnElement[bool]:
        return and_(*(part.to_clause(table) for part in self.parts))


@dataclass(frozen=True)
class field:
    """Reference to a row column, the entry point for building comparisons."""

    name: str

    def eq(self, value: Any) -> Compare:
        return Compare(self.name, "eq", value)

    def lt(self, value: Any) -> Compare:
        return Compare(self.name, "lt", value)

    def gt(self, value: Any) -> Compare:
        return Compare(self.name, "gt", value)

    def in_(self, values) -> In:
        return In(self.name, frozenset(values))
