"""Document models."""

from __future__ import annotations

from .common import TimestampMixin, utcnow
from .task import (
    DESCRIPTION_MAX_LENGTH,
    PRIORITY_RANK,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
    Task,
    TaskPriority,
    TaskSort,
    TaskStatus,
)
from .user import NAME_MAX_LENGTH, User

DOCUMENT_MODELS = [User, Task]

__all__ = [
    "DESCRIPTION_MAX_LENGTH",
    "DOCUMENT_MODELS",
    "NAME_MAX_LENGTH",
    "PRIORITY_RANK",
    "TITLE_MAX_LENGTH",
    "TITLE_MIN_LENGTH",
    "Task",
    "TaskPriority",
    "TaskSort",
    "TaskStatus",
    "TimestampMixin",
    "User",
    "utcnow",
]
