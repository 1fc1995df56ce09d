"""Filter and pagination composition for task queries.

Conditions are collected as ``(column, operator, value)`` triples and only
rendered into SQLAlchemy expressions at the end, so every value ends up as a
bound parameter. Columns and operators are checked against fixed whitelists.
``limit`` and ``offset`` are range-checked before rendering; values outside
the accepted range are dropped rather than rejected.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlmodel import col, select

from .models import TaskRow, to_storage_flag

MIN_LIMIT = 1
MAX_LIMIT = 100

FILTERABLE_COLUMNS = frozenset({"completed"})

_OPERATORS: Dict[str, Callable[[Any, Any], Any]] = {
    "=": operator.eq,
}


def _as_int(value: Any) -> Optional[int]:
    # bool is an int subclass; True must not turn into LIMIT 1
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def effective_limit(value: Any) -> Optional[int]:
    value = _as_int(value)
    if value is None or not MIN_LIMIT <= value <= MAX_LIMIT:
        return None
    return value


def effective_offset(value: Any) -> Optional[int]:
    value = _as_int(value)
    if value is None or value < 0:
        return None
    return value


@dataclass
class TaskFilters:
    completed: Optional[bool] = None
    limit: Optional[int] = None
    offset: Optional[int] = None


class TaskQuery:
    """Accumulates task conditions and renders them into statements."""

    def __init__(self) -> None:
        self._conditions: List[Tuple[str, str, Any]] = []
        self._limit: Optional[int] = None
        self._offset: Optional[int] = None

    @classmethod
    def from_filters(cls, filters: Optional[TaskFilters] = None) -> "TaskQuery":
        query = cls()
        if filters is None:
            return query
        if filters.completed is not None:
            query.where("completed", "=", to_storage_flag(filters.completed))
        return query.paginate(filters.limit, filters.offset)

    @property
    def conditions(self) -> List[Tuple[str, str, Any]]:
        return list(self._conditions)

    @property
    def limit(self) -> Optional[int]:
        return self._limit

    @property
    def offset(self) -> Optional[int]:
        return self._offset

    def where(self, column: str, op: str, value: Any) -> "TaskQuery":
        if column not in FILTERABLE_COLUMNS:
            raise ValueError(f"Unsupported filter column: {column!r}")
        if op not in _OPERATORS:
            raise ValueError(f"Unsupported filter operator: {op!r}")
        self._conditions.append((column, op, value))
        return self

    def paginate(self, limit: Any = None, offset: Any = None) -> "TaskQuery":
        self._limit = effective_limit(limit)
        self._offset = effective_offset(offset)
        return self

    def _clauses(self) -> list:
        return [
            _OPERATORS[op](col(getattr(TaskRow, column)), value)
            for column, op, value in self._conditions
        ]

    def select(self):
        """SELECT for the matching rows, newest first, with pagination applied."""
        stmt = select(TaskRow)
        clauses = self._clauses()
        if clauses:
            stmt = stmt.where(*clauses)
        # id breaks ties between rows created within the same timestamp
        stmt = stmt.order_by(col(TaskRow.created_at).desc(), col(TaskRow.id).desc())
        if self._limit is not None:
            stmt = stmt.limit(self._limit)
        if self._offset is not None:
            stmt = stmt.offset(self._offset)
        return stmt

    def count(self):
        """COUNT(*) over the matching rows; pagination does not apply."""
        stmt = select(func.count()).select_from(TaskRow)
        clauses = self._clauses()
        if clauses:
            stmt = stmt.where(*clauses)
        return stmt
