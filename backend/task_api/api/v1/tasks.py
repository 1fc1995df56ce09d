import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status
from sqlmodel import Session

from ..dependencies import get_session
from ...db.crud import (
    count_tasks,
    create_task,
    delete_task,
    get_stats,
    get_task,
    list_tasks,
    mark_completed,
    mark_pending,
    update_task,
)
from ...db.query import MAX_LIMIT, MIN_LIMIT, TaskFilters
from ...schemas.tasks import PageMeta, TaskCreate, TaskOut, TaskPage, TaskStats, TaskUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tasks"])

TaskId = Annotated[int, Path(ge=1, description="Task ID must be a positive integer")]


def _found(task: Optional[TaskOut]) -> TaskOut:
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.get("/tasks", response_model=TaskPage)
def list_all(
    completed: Optional[bool] = Query(None, description="Only tasks with this completion state"),
    limit: Optional[int] = Query(None, ge=MIN_LIMIT, le=MAX_LIMIT),
    offset: Optional[int] = Query(None, ge=0),
    session: Session = Depends(get_session),
):
    filters = TaskFilters(completed=completed, limit=limit, offset=offset)
    tasks = list_tasks(session, filters)
    total = count_tasks(session, filters)
    meta = PageMeta(total=total, count=len(tasks), limit=limit, offset=offset or 0)
    return TaskPage(data=tasks, meta=meta)


# declared before /tasks/{task_id} so "stats" is not parsed as an id
@router.get("/tasks/stats", response_model=TaskStats)
def stats(session: Session = Depends(get_session)):
    return get_stats(session)


@router.get("/tasks/{task_id}", response_model=TaskOut)
def get_one(task_id: TaskId, session: Session = Depends(get_session)):
    return _found(get_task(session, task_id))


@router.post("/tasks", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create(body: TaskCreate, session: Session = Depends(get_session)):
    try:
        task = create_task(session, body)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    logger.info("Task created id=%s", task.id)
    return task


@router.put("/tasks/{task_id}", response_model=TaskOut)
def update(body: TaskUpdate, task_id: TaskId, session: Session = Depends(get_session)):
    try:
        task = _found(update_task(session, task_id, body))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    logger.info("Task updated id=%s fields=%s", task_id, sorted(body.model_fields_set))
    return task


@router.patch("/tasks/{task_id}/complete", response_model=TaskOut)
def complete(task_id: TaskId, session: Session = Depends(get_session)):
    task = _found(mark_completed(session, task_id))
    logger.info("Task marked completed id=%s", task_id)
    return task


@router.patch("/tasks/{task_id}/pending", response_model=TaskOut)
def pending(task_id: TaskId, session: Session = Depends(get_session)):
    task = _found(mark_pending(session, task_id))
    logger.info("Task marked pending id=%s", task_id)
    return task


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove(task_id: TaskId, session: Session = Depends(get_session)) -> Response:
    if not delete_task(session, task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    logger.info("Task deleted id=%s", task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
