"""Task documents stored in MongoDB via beanie."""

from __future__ import annotations

from enum import Enum

from beanie import Document, Indexed, PydanticObjectId
from pydantic import Field

from .common import TimestampMixin

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 120
DESCRIPTION_MAX_LENGTH = 1000


class TaskStatus(str, Enum):
    """Canonical task states."""

    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class TaskPriority(str, Enum):
    """Canonical task priorities."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


PRIORITY_RANK: dict[TaskPriority, int] = {
    TaskPriority.LOW: 1,
    TaskPriority.MEDIUM: 2,
    TaskPriority.HIGH: 3,
}


class TaskSort(str, Enum):
    """Orderings offered when listing tasks."""

    NEWEST = "newest"
    OLDEST = "oldest"
    PRIORITY_HIGH = "priority-high"
    PRIORITY_LOW = "priority-low"


class Task(Document, TimestampMixin):
    """A single to-do item owned by exactly one user."""

    title: str = Field(min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    status: TaskStatus = Field(default=TaskStatus.PENDING)
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    owner_id: Indexed(PydanticObjectId)  # type: ignore[valid-type]

    class Settings:
        name = "tasks"


__all__ = [
    "DESCRIPTION_MAX_LENGTH",
    "PRIORITY_RANK",
    "TITLE_MAX_LENGTH",
    "TITLE_MIN_LENGTH",
    "Task",
    "TaskPriority",
    "TaskSort",
    "TaskStatus",
]
