"""Task model"""

import enum
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, JSON, Enum
from app.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskLifecycle(str, enum.Enum):
    """Soft-delete state. Archived tasks stay in the table but leave every default view."""
    ACTIVE = "active"
    ARCHIVED = "archived"


def _enum_column(enum_cls, default):
    # stocke la valeur ("in-progress") et non le nom du membre
    return Column(
        Enum(enum_cls, values_callable=lambda e: [m.value for m in e], native_enum=False, length=20),
        nullable=False,
        default=default,
        index=True,
    )


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(200), nullable=False)
    description = Column(String(1000), nullable=True)
    status = _enum_column(TaskStatus, TaskStatus.PENDING)
    priority = _enum_column(TaskPriority, TaskPriority.MEDIUM)
    due_date = Column(Date, nullable=True, index=True)
    tags = Column(JSON, nullable=False, default=list)

    lifecycle = _enum_column(TaskLifecycle, TaskLifecycle.ACTIVE)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    @property
    def is_archived(self) -> bool:
        return self.lifecycle == TaskLifecycle.ARCHIVED
