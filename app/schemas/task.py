"""Pydantic schemas for task request/response validation."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BeforeValidator, ConfigDict, Field, StringConstraints, field_validator
from typing_extensions import Annotated

from app.core.config import settings
from app.models.task import TaskLifecycle, TaskPriority, TaskStatus
from app.schemas.common import CamelModel

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, max_length=1000)]
Tag = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]

# (page-1)*limit doit tenir dans un OFFSET int64
MAX_PAGE = (2 ** 63 - 1) // settings.MAX_PAGE_LIMIT


def _parse_due_date(value):
    # accepte "2025-03-01" ou un datetime ISO-8601 ("2025-03-01T10:00:00Z"), garde la date
    if isinstance(value, str) and "T" in value:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    if isinstance(value, datetime):
        return value.date()
    return value


DueDate = Annotated[date, BeforeValidator(_parse_due_date)]


class TaskCreate(CamelModel):
    """Schema for creating a task."""

    title: Title
    description: Optional[Description] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[DueDate] = None
    tags: List[Tag] = Field(default_factory=list)


class TaskUpdate(CamelModel):
    """Schema for updating an existing task. Only fields sent by the client are applied."""

    title: Optional[Title] = None
    description: Optional[Description] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[DueDate] = None
    tags: Optional[List[Tag]] = None

    @field_validator("title", "status", "priority", "tags", mode="before")
    @classmethod
    def reject_null(cls, value, info):
        # null n'est permis que pour description et dueDate
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class TaskFilter(CamelModel):
    """Query parameters accepted by the task listing."""

    page: int = Field(1, ge=1, le=MAX_PAGE)
    limit: int = Field(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    search: Optional[str] = Field(None, max_length=100)

    @field_validator("status", "priority", "search", mode="before")
    @classmethod
    def empty_is_absent(cls, value):
        return None if value == "" else value

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class TaskResponse(CamelModel):
    """Schema for task responses from API."""

    id: int
    user_id: int
    title: str
    description: Optional[str]
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[date]
    tags: List[str]
    lifecycle: TaskLifecycle
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Pagination(CamelModel):
    current: int
    pages: int
    total: int
    has_next: bool
    has_prev: bool


class TaskListResponse(CamelModel):
    tasks: List[TaskResponse]
    pagination: Pagination


class TaskEnvelope(CamelModel):
    task: TaskResponse


class TaskMessageResponse(CamelModel):
    message: str
    task: TaskResponse


class TaskStats(CamelModel):
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    high_priority: int = 0
    urgent_priority: int = 0


class StatsResponse(CamelModel):
    stats: TaskStats
