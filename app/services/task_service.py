"""
Task service: listing, single fetch, create, update and archive.

Every query is scoped to the owner passed in by the caller. The owner id is
trusted; resolving it from a token is the router's job (app.core.auth).
"""

import math
from typing import Any, Dict, List, Tuple

from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from app.core.database import store_operation
from app.core.errors import NotFound, ValidationError, format_pydantic_errors
from app.models.task import Task, TaskLifecycle, utcnow
from app.schemas.task import Pagination, TaskCreate, TaskFilter, TaskUpdate


def build_filter(**params: Any) -> TaskFilter:
    """Validate raw listing parameters; absent (None) values fall back to defaults."""
    try:
        return TaskFilter.model_validate({k: v for k, v in params.items() if v is not None})
    except PydanticValidationError as exc:
        raise ValidationError(format_pydantic_errors(exc.errors())) from exc


def paginate(total: int, page: int, limit: int) -> Pagination:
    if total == 0:
        return Pagination(current=page, pages=0, total=0, has_next=False, has_prev=False)
    pages = math.ceil(total / limit)
    return Pagination(
        current=page,
        pages=pages,
        total=total,
        has_next=page < pages,
        has_prev=page > 1,
    )


def _escape_like(term: str) -> str:
    # recherche littérale : % et _ ne sont pas des jokers
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _owned_active(db: Session, owner_id: int) -> Query:
    return db.query(Task).filter(
        Task.user_id == owner_id,
        Task.lifecycle == TaskLifecycle.ACTIVE,
    )


def list_tasks(db: Session, owner_id: int, filters: TaskFilter) -> Tuple[List[Task], Pagination]:
    query = _owned_active(db, owner_id)

    if filters.status:
        query = query.filter(Task.status == filters.status)

    if filters.priority:
        query = query.filter(Task.priority == filters.priority)

    if filters.search:
        pattern = f"%{_escape_like(filters.search)}%"
        query = query.filter(or_(
            Task.title.ilike(pattern, escape="\\"),
            Task.description.ilike(pattern, escape="\\"),
        ))

    # find et count ne partagent pas de transaction : total peut légèrement différer sous écriture concurrente
    with store_operation(db, "fetch tasks"):
        tasks = (
            query.order_by(Task.created_at.desc(), Task.id.desc())
            .offset(filters.skip)
            .limit(filters.limit)
            .all()
        )
        total = query.order_by(None).count()

    return tasks, paginate(total, filters.page, filters.limit)


def get_task(db: Session, owner_id: int, task_id: int) -> Task:
    with store_operation(db, "fetch task"):
        task = _owned_active(db, owner_id).filter(Task.id == task_id).first()

    if not task:
        raise NotFound()
    return task


def create_task(db: Session, owner_id: int, data: TaskCreate) -> Task:
    task = Task(
        user_id=owner_id,
        title=data.title,
        description=data.description,
        status=data.status,
        priority=data.priority,
        due_date=data.due_date,
        tags=list(data.tags),
        lifecycle=TaskLifecycle.ACTIVE,
    )
    with store_operation(db, "create task"):
        db.add(task)
        db.commit()
        db.refresh(task)

    logger.info(f"Task created: {task.id} (user={owner_id})")
    return task


def update_task(db: Session, owner_id: int, task_id: int, data: TaskUpdate) -> Task:
    task = get_task(db, owner_id, task_id)

    changes: Dict[str, Any] = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(task, field, list(value) if field == "tags" else value)
    task.updated_at = utcnow()

    with store_operation(db, "update task"):
        db.commit()
        db.refresh(task)

    logger.info(f"Task updated: {task_id} fields={sorted(changes)}")
    return task


def archive_task(db: Session, owner_id: int, task_id: int) -> None:
    """Soft delete. Archiving an already archived task is a no-op success."""
    with store_operation(db, "delete task"):
        matched = (
            db.query(Task)
            .filter(Task.id == task_id, Task.user_id == owner_id)
            .update(
                {Task.lifecycle: TaskLifecycle.ARCHIVED, Task.updated_at: utcnow()},
                synchronize_session=False,
            )
        )
        db.commit()

    if not matched:
        raise NotFound()
    logger.info(f"Task archived: {task_id} (user={owner_id})")

