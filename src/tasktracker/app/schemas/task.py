"""Task-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from beanie import PydanticObjectId
from pydantic import BaseModel, ConfigDict, Field

from ..models import TaskPriority, TaskStatus

TASK_READ_EXAMPLE = {
    "id": "665f1c2e9b1e8a3d4c2b1a01",
    "title": "Draft product documentation",
    "description": "Outline sections for the public API guide.",
    "status": TaskStatus.PENDING.value,
    "priority": TaskPriority.MEDIUM.value,
    "owner_id": "665f1c2e9b1e8a3d4c2b1a00",
    "created_at": "2024-01-01T12:00:00Z",
    "updated_at": "2024-01-02T08:30:00Z",
}


class TaskCreate(BaseModel):
    """Payload for creating a new task.

    ``status`` and ``priority`` accept synonyms (``"done"``, ``"urgent"``...)
    which are normalised before validation.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Draft product documentation",
                "description": "Outline sections for the public API guide.",
                "status": "todo",
                "priority": "high",
            }
        }
    )

    title: str | None = None
    description: str | None = None
    status: str | None = None
    priority: str | None = None


class TaskUpdate(BaseModel):
    """Partial update. Keys outside the editable fields are dropped."""

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "title": "Update API documentation",
                "status": "in progress",
            }
        },
    )

    title: str | None = None
    description: str | None = None
    status: str | None = None
    priority: str | None = None


class TaskRead(BaseModel):
    """Public representation of a task."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={"example": TASK_READ_EXAMPLE},
    )

    id: PydanticObjectId
    title: str
    description: str = ""
    status: TaskStatus
    priority: TaskPriority
    owner_id: PydanticObjectId
    created_at: datetime
    updated_at: datetime


class TaskStatistics(BaseModel):
    """Per-status task counts for the authenticated user."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "total": 3,
                "by_status": {
                    TaskStatus.PENDING.value: 1,
                    TaskStatus.IN_PROGRESS.value: 1,
                    TaskStatus.COMPLETED.value: 1,
                },
            }
        }
    )

    total: int = Field(ge=0)
    by_status: dict[str, int] = Field(default_factory=dict)


__all__ = [
    "TaskCreate",
    "TaskRead",
    "TaskStatistics",
    "TaskUpdate",
]
