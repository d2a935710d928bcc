"""Domain service layer package."""

from __future__ import annotations

from .auth import AuthResult, AuthService
from .normalizer import (
    normalize_priority,
    normalize_status,
    prepare_task_fields,
    validate_task_payload,
)
from .tasks import TaskService, TaskStatisticsResult

__all__ = [
    "AuthResult",
    "AuthService",
    "TaskService",
    "TaskStatisticsResult",
    "normalize_priority",
    "normalize_status",
    "prepare_task_fields",
    "validate_task_payload",
]
