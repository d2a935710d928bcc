"""Service layer encapsulating task operations for one owner."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from beanie import PydanticObjectId

from ..errors import NotFoundError, ValidationError
from ..models import Task, TaskSort, TaskStatus
from ..repositories import TaskRepository, parse_object_id
from .normalizer import normalize_status, prepare_task_fields

logger = logging.getLogger(__name__)

TASK_NOT_FOUND = "Task not found"
INVALID_TASK_ID = "Invalid task id"


@dataclass(slots=True)
class TaskStatisticsResult:
    """Per-status counts for one owner."""

    total: int
    by_status: dict[str, int]


class TaskService:
    """High-level orchestration for ``Task`` documents.

    Every method is scoped to ``owner_id``; raw task ids from the client are
    format-checked before any query is issued.
    """

    def __init__(self, owner_id: PydanticObjectId, *, repository: TaskRepository | None = None) -> None:
        self._owner_id = owner_id
        self._repository = repository or TaskRepository()

    def _task_id(self, raw_task_id: str) -> PydanticObjectId:
        return parse_object_id(raw_task_id, message=INVALID_TASK_ID)

    async def create_task(self, payload: Mapping[str, Any]) -> Task:
        fields = prepare_task_fields(payload)
        task = await self._repository.create(self._owner_id, fields)
        logger.info("Task created", extra={"task_id": str(task.id), "owner_id": str(self._owner_id)})
        return task

    async def list_tasks(
        self,
        *,
        status: str | None = None,
        search: str | None = None,
        sort: TaskSort = TaskSort.NEWEST,
    ) -> list[Task]:
        """Return the owner's tasks; ``status`` accepts the same synonyms as payloads."""
        status_filter: TaskStatus | None = None
        if status is not None and status.strip():
            normalised = normalize_status(status)
            if not isinstance(normalised, TaskStatus):
                raise ValidationError("Invalid status value")
            status_filter = normalised
        query = search.strip() if search else None
        return await self._repository.list_by_owner(
            self._owner_id,
            status=status_filter,
            search=query or None,
            sort=sort,
        )

    async def get_task(self, raw_task_id: str) -> Task:
        task = await self._repository.get_by_id_for_owner(self._task_id(raw_task_id), self._owner_id)
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND)
        return task

    async def update_task(self, raw_task_id: str, payload: Mapping[str, Any]) -> Task:
        task_id = self._task_id(raw_task_id)
        fields = prepare_task_fields(payload, is_update=True)
        task = await self._repository.update_by_id_for_owner(task_id, self._owner_id, fields)
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND)
        logger.info("Task updated", extra={"task_id": str(task_id), "fields": sorted(fields)})
        return task

    async def delete_task(self, raw_task_id: str) -> None:
        task_id = self._task_id(raw_task_id)
        if not await self._repository.delete_by_id_for_owner(task_id, self._owner_id):
            raise NotFoundError(TASK_NOT_FOUND)
        logger.info("Task deleted", extra={"task_id": str(task_id)})

    async def get_statistics(self) -> TaskStatisticsResult:
        counts = await self._repository.count_by_status(self._owner_id)
        by_status = {status.value: counts.get(status, 0) for status in TaskStatus}
        return TaskStatisticsResult(total=sum(by_status.values()), by_status=by_status)


__all__ = ["INVALID_TASK_ID", "TASK_NOT_FOUND", "TaskService", "TaskStatisticsResult"]
