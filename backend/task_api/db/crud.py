"""Task data access.

Every function works on a session borrowed for a single request and returns
``TaskOut`` records, never ``TaskRow`` instances, so the 0/1 storage encoding
of ``completed`` does not leak out of this module. Absence is reported as
``None`` (or ``False`` for delete); storage errors propagate as raised.

``update_task`` checks for the row, then writes, then re-reads. These are
separate round trips, not one transaction. If the row is deleted between the
check and the write, the UPDATE matches nothing and the call returns ``None``.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, update
from sqlmodel import Session, col, select

from .models import TaskRow, from_storage_flag, to_storage_flag, utcnow
from .query import TaskFilters, TaskQuery
from ..schemas.tasks import TaskCreate, TaskOut, TaskStats, TaskUpdate


def _to_task(row: TaskRow) -> TaskOut:
    return TaskOut(
        id=row.id,
        title=row.title,
        description=row.description,
        completed=from_storage_flag(row.completed),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _clean_description(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return value.strip() or None


def _next_timestamp(previous: datetime) -> datetime:
    # updated_at must move forward even when the clock has not ticked
    now = utcnow()
    if now > previous:
        return now
    return previous + timedelta(microseconds=1)


def _collect_changes(data: TaskUpdate) -> Dict[str, Any]:
    fields = data.model_dump(exclude_unset=True)
    changes: Dict[str, Any] = {}
    if fields.get("title") is not None:
        title = fields["title"].strip()
        if not title:
            raise ValueError("Task title cannot be empty")
        changes["title"] = title
    if "description" in fields:
        changes["description"] = _clean_description(fields["description"])
    if fields.get("completed") is not None:
        changes["completed"] = to_storage_flag(fields["completed"])
    return changes


def list_tasks(session: Session, filters: Optional[TaskFilters] = None) -> List[TaskOut]:
    stmt = TaskQuery.from_filters(filters).select()
    return [_to_task(row) for row in session.exec(stmt).all()]


def get_task(session: Session, task_id: int) -> Optional[TaskOut]:
    stmt = (
        select(TaskRow)
        .where(col(TaskRow.id) == task_id)
        .execution_options(populate_existing=True)
    )
    row = session.exec(stmt).first()
    return _to_task(row) if row is not None else None


def count_tasks(session: Session, filters: Optional[TaskFilters] = None) -> int:
    return session.exec(TaskQuery.from_filters(filters).count()).one()


def create_task(session: Session, data: TaskCreate) -> TaskOut:
    title = (data.title or "").strip()
    if not title:
        raise ValueError("Task title cannot be empty")

    now = utcnow()
    row = TaskRow(
        title=title,
        description=_clean_description(data.description),
        completed=to_storage_flag(data.completed),
        created_at=now,
        updated_at=now,
    )
    session.add(row)
    session.flush()
    task_id = row.id
    session.commit()

    task = get_task(session, task_id)
    if task is None:
        raise LookupError(f"Task {task_id} disappeared right after insert")
    return task


def update_task(session: Session, task_id: int, data: TaskUpdate) -> Optional[TaskOut]:
    existing = get_task(session, task_id)
    if existing is None:
        return None

    changes = _collect_changes(data)
    if not changes:
        return existing

    changes["updated_at"] = _next_timestamp(existing.updated_at)
    table = TaskRow.__table__
    stmt = update(table).where(table.c.id == task_id).values(**changes)
    result = session.connection().execute(stmt)
    if result.rowcount == 0:
        session.rollback()
        return None
    session.commit()
    return get_task(session, task_id)


def delete_task(session: Session, task_id: int) -> bool:
    table = TaskRow.__table__
    result = session.connection().execute(delete(table).where(table.c.id == task_id))
    session.commit()
    return result.rowcount > 0


def mark_completed(session: Session, task_id: int) -> Optional[TaskOut]:
    return update_task(session, task_id, TaskUpdate(completed=True))


def mark_pending(session: Session, task_id: int) -> Optional[TaskOut]:
    return update_task(session, task_id, TaskUpdate(completed=False))


def get_stats(session: Session) -> TaskStats:
    total = count_tasks(session)
    completed = count_tasks(session, TaskFilters(completed=True))
    pending = count_tasks(session, TaskFilters(completed=False))
    rate = round(completed / total * 100, 2) if total > 0 else 0.0
    return TaskStats(total=total, completed=completed, pending=pending, completion_rate=rate)
