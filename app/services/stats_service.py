"""Dashboard statistics over the owner's active tasks."""

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from app.core.database import store_operation
from app.models.task import Task, TaskLifecycle, TaskPriority, TaskStatus
from app.schemas.task import TaskStats


def _count_where(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


def summarize(db: Session, owner_id: int) -> TaskStats:
    # Une seule agrégation ; les tâches annulées ne comptent que dans total
    with store_operation(db, "fetch statistics"):
        row = db.query(
            func.count(Task.id).label("total"),
            _count_where(Task.status == TaskStatus.PENDING).label("pending"),
            _count_where(Task.status == TaskStatus.IN_PROGRESS).label("in_progress"),
            _count_where(Task.status == TaskStatus.COMPLETED).label("completed"),
            _count_where(Task.priority == TaskPriority.HIGH).label("high_priority"),
            _count_where(Task.priority == TaskPriority.URGENT).label("urgent_priority"),
        ).filter(
            Task.user_id == owner_id,
            Task.lifecycle == TaskLifecycle.ACTIVE,
        ).one()

    if not row.total:
        return TaskStats()

    return TaskStats(
        total=int(row.total),
        pending=int(row.pending),
        in_progress=int(row.in_progress),
        completed=int(row.completed),
        high_priority=int(row.high_priority),
        urgent_priority=int(row.urgent_priority),
    )
