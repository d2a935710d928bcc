"""Owner-scoped persistence for task documents."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from beanie import PydanticObjectId, SortDirection, UpdateResponse
from beanie.operators import RegEx, Set

from ..models import PRIORITY_RANK, Task, TaskSort, TaskStatus, utcnow
from .base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """CRUD over ``Task`` documents, always filtered by the owning user.

    Lookups that miss because the task does not exist and lookups that miss
    because it belongs to someone else are indistinguishable to callers.
    """

    def __init__(self) -> None:
        super().__init__(Task)

    async def create(self, owner_id: PydanticObjectId, fields: Mapping[str, Any]) -> Task:
        """Insert a task for ``owner_id``; id and timestamps are assigned here."""
        now = utcnow()
        task = Task(owner_id=owner_id, created_at=now, updated_at=now, **fields)
        return await self.add(task)

    async def list_by_owner(
        self,
        owner_id: PydanticObjectId,
        *,
        status: TaskStatus | None = None,
        search: str | None = None,
        sort: TaskSort = TaskSort.NEWEST,
    ) -> list[Task]:
        """Return the owner's tasks, newest first unless ``sort`` says otherwise."""
        criteria: list[Any] = [Task.owner_id == owner_id]
        if status is not None:
            criteria.append(Task.status == status)
        if search:
            criteria.append(RegEx(Task.title, re.escape(search), options="i"))

        direction = SortDirection.ASCENDING if sort is TaskSort.OLDEST else SortDirection.DESCENDING
        tasks = await Task.find(*criteria).sort([("created_at", direction), ("_id", direction)]).to_list()

        # Stable sorts keep newest-first order inside each priority band.
        if sort is TaskSort.PRIORITY_HIGH:
            tasks.sort(key=lambda task: PRIORITY_RANK[task.priority], reverse=True)
        elif sort is TaskSort.PRIORITY_LOW:
            tasks.sort(key=lambda task: PRIORITY_RANK[task.priority])
        return tasks

    async def get_by_id_for_owner(
        self,
        task_id: PydanticObjectId,
        owner_id: PydanticObjectId,
    ) -> Task | None:
        return await Task.find_one(Task.id == task_id, Task.owner_id == owner_id)

    async def update_by_id_for_owner(
        self,
        task_id: PydanticObjectId,
        owner_id: PydanticObjectId,
        fields: Mapping[str, Any],
    ) -> Task | None:
        """Atomically apply ``fields`` and return the updated task, if owned."""
        changes: dict[str, Any] = {key: getattr(value, "value", value) for key, value in fields.items()}
        changes["updated_at"] = utcnow()
        return await Task.find_one(Task.id == task_id, Task.owner_id == owner_id).update(
            Set(changes),
            response_type=UpdateResponse.NEW_DOCUMENT,
        )

    async def delete_by_id_for_owner(
        self,
        task_id: PydanticObjectId,
        owner_id: PydanticObjectId,
    ) -> bool:
        """Delete the task if owned, returning ``True`` iff a document was removed."""
        result = await Task.find_one(Task.id == task_id, Task.owner_id == owner_id).delete()
        return bool(result is not None and result.deleted_count)

    async def count_by_status(self, owner_id: PydanticObjectId) -> dict[TaskStatus, int]:
        pipeline = [{"$group": {"_id": "$status", "count": {"$sum": 1}}}]
        rows = await Task.find(Task.owner_id == owner_id).aggregate(pipeline).to_list()
        return {TaskStatus(row["_id"]): int(row["count"]) for row in rows}


__all__ = ["TaskRepository"]
