from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.task import (
    StatsResponse,
    TaskCreate,
    TaskEnvelope,
    TaskListResponse,
    TaskMessageResponse,
    TaskUpdate,
)
from app.services import stats_service, task_service

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=TaskListResponse)
def list_tasks(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    priority: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
):
    filters = task_service.build_filter(
        page=page, limit=limit, status=status_filter, priority=priority, search=search
    )
    tasks, pagination = task_service.list_tasks(db, current_user.id, filters)
    return {"tasks": tasks, "pagination": pagination}


# Déclarée avant /{task_id}
@router.get("/stats/summary", response_model=StatsResponse)
def stats_summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return {"stats": stats_service.summarize(db, current_user.id)}


@router.get("/{task_id}", response_model=TaskEnvelope)
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return {"task": task_service.get_task(db, current_user.id, task_id)}


@router.post("", response_model=TaskMessageResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task = task_service.create_task(db, current_user.id, task_data)
    return {"message": "Task created successfully", "task": task}


@router.put("/{task_id}", response_model=TaskMessageResponse)
def update_task(
    task_id: int,
    task_data: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task = task_service.update_task(db, current_user.id, task_id, task_data)
    return {"message": "Task updated successfully", "task": task}


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    # soft delete : la tâche passe en "archived"
    task_service.archive_task(db, current_user.id, task_id)
    return {"message": "Task deleted successfully"}
