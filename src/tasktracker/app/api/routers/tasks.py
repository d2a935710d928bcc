"""Routes handling task CRUD operations for the authenticated user."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from ...deps import TaskServiceDependency
from ...models import Task, TaskSort
from ...schemas import TaskCreate, TaskRead, TaskStatistics, TaskUpdate

router = APIRouter(prefix="/tasks", tags=["tasks"])

StatusQuery = Annotated[
    str | None,
    Query(description="Only return tasks in this status; synonyms such as 'done' are accepted."),
]
SearchQuery = Annotated[
    str | None,
    Query(max_length=120, description="Case-insensitive substring to match against task titles."),
]
SortQuery = Annotated[
    TaskSort,
    Query(description="Result ordering."),
]


def _map_task(task: Task) -> TaskRead:
    return TaskRead.model_validate(task)


@router.post(
    "",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new task",
)
async def create_task(payload: TaskCreate, service: TaskServiceDependency) -> TaskRead:
    task = await service.create_task(payload.model_dump(exclude_unset=True))
    return _map_task(task)


@router.get("", response_model=list[TaskRead], summary="List the caller's tasks, newest first")
async def list_tasks(
    service: TaskServiceDependency,
    status: StatusQuery = None,
    q: SearchQuery = None,
    sort: SortQuery = TaskSort.NEWEST,
) -> list[TaskRead]:
    tasks = await service.list_tasks(status=status, search=q, sort=sort)
    return [_map_task(task) for task in tasks]


@router.get("/statistics", response_model=TaskStatistics, summary="Count the caller's tasks by status")
async def get_task_statistics(service: TaskServiceDependency) -> TaskStatistics:
    stats = await service.get_statistics()
    return TaskStatistics(total=stats.total, by_status=stats.by_status)


@router.get("/{task_id}", response_model=TaskRead, summary="Retrieve a task by id")
async def get_task(task_id: str, service: TaskServiceDependency) -> TaskRead:
    return _map_task(await service.get_task(task_id))


@router.put("/{task_id}", response_model=TaskRead, summary="Update editable task fields")
async def update_task(task_id: str, payload: TaskUpdate, service: TaskServiceDependency) -> TaskRead:
    task = await service.update_task(task_id, payload.model_dump(exclude_unset=True))
    return _map_task(task)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a task",
)
async def delete_task(task_id: str, service: TaskServiceDependency) -> Response:
    await service.delete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
