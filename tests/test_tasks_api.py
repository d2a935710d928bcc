from __future__ import annotations

import pytest
from beanie import PydanticObjectId
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

TIMESTAMP_FIELDS = ("created_at", "updated_at")


def _without_timestamps(task: dict) -> dict:
    return {key: value for key, value in task.items() if key not in TIMESTAMP_FIELDS}


async def test_create_task_normalises_and_trims(client: AsyncClient, register_user) -> None:
    user = await register_user()

    response = await client.post(
        "/api/tasks",
        json={
            "title": "  Write report  ",
            "description": "  quarterly numbers ",
            "status": "done",
            "priority": "urgent",
        },
        headers=user.headers,
    )

    assert response.status_code == 201, response.text
    task = response.json()
    assert task["title"] == "Write report"
    assert task["description"] == "quarterly numbers"
    assert task["status"] == "Completed"
    assert task["priority"] == "High"
    assert task["owner_id"] == user.id
    assert task["created_at"] and task["updated_at"]


async def test_create_task_applies_defaults(create_task, register_user) -> None:
    user = await register_user()

    task = await create_task(user, title="Buy milk")

    assert task["status"] == "Pending"
    assert task["priority"] == "Medium"
    assert task["description"] == ""


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({}, "Title is required"),
        ({"title": "   "}, "Title is required"),
        ({"title": "ab"}, "Title must be at least 3 characters"),
        ({"title": "x" * 121}, "Title must be at most 120 characters"),
        ({"title": "Valid title", "description": "d" * 1001}, "Description must be at most 1000 characters"),
        ({"title": "Valid title", "status": "bogus"}, "Invalid status value"),
        ({"title": "Valid title", "priority": "someday"}, "Invalid priority value"),
    ],
)
async def test_create_task_rejects_invalid_payloads(
    client: AsyncClient,
    register_user,
    payload: dict[str, str],
    message: str,
) -> None:
    user = await register_user()

    response = await client.post("/api/tasks", json=payload, headers=user.headers)

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "validation_error"
    assert body["message"] == message


async def test_title_length_boundaries(client: AsyncClient, register_user) -> None:
    user = await register_user()

    shortest = await client.post("/api/tasks", json={"title": "abc"}, headers=user.headers)
    longest = await client.post("/api/tasks", json={"title": "y" * 120}, headers=user.headers)

    assert shortest.status_code == 201
    assert longest.status_code == 201


async def test_task_routes_require_authentication(client: AsyncClient) -> None:
    for method, path in (
        ("GET", "/api/tasks"),
        ("POST", "/api/tasks"),
        ("GET", "/api/tasks/statistics"),
        ("GET", f"/api/tasks/{PydanticObjectId()}"),
        ("DELETE", f"/api/tasks/{PydanticObjectId()}"),
    ):
        response = await client.request(method, path, json={"title": "Anything"} if method == "POST" else None)
        assert response.status_code == 401, (method, path)
        assert response.json()["message"] == "Unauthorized"


async def test_list_tasks_returns_newest_first(client: AsyncClient, create_task, register_user) -> None:
    user = await register_user()
    titles = ["First task", "Second task", "Third task"]
    for title in titles:
        await create_task(user, title=title)

    response = await client.get("/api/tasks", headers=user.headers)

    assert response.status_code == 200
    assert [task["title"] for task in response.json()] == list(reversed(titles))


async def test_list_tasks_for_new_user_is_empty(client: AsyncClient, register_user) -> None:
    user = await register_user()

    response = await client.get("/api/tasks", headers=user.headers)

    assert response.status_code == 200
    assert response.json() == []


async def test_get_task_by_id(client: AsyncClient, create_task, register_user) -> None:
    user = await register_user()
    task = await create_task(user, title="Fetch me")

    response = await client.get(f"/api/tasks/{task['id']}", headers=user.headers)

    assert response.status_code == 200
    assert _without_timestamps(response.json()) == _without_timestamps(task)


@pytest.mark.parametrize("raw_id", ["abc", "12345", "z" * 24, f"{'a' * 23}"])
async def test_malformed_task_id_is_a_validation_error(client: AsyncClient, register_user, raw_id: str) -> None:
    user = await register_user()

    for method in ("GET", "PUT", "DELETE"):
        response = await client.request(
            method,
            f"/api/tasks/{raw_id}",
            json={"title": "Updated"} if method == "PUT" else None,
            headers=user.headers,
        )
        assert response.status_code == 400, method
        body = response.json()
        assert body["code"] == "invalid_identifier"
        assert body["message"] == "Invalid task id"


async def test_unknown_task_id_is_not_found(client: AsyncClient, register_user) -> None:
    user = await register_user()
    missing = PydanticObjectId()

    get_response = await client.get(f"/api/tasks/{missing}", headers=user.headers)
    put_response = await client.put(f"/api/tasks/{missing}", json={"title": "Whatever"}, headers=user.headers)
    delete_response = await client.delete(f"/api/tasks/{missing}", headers=user.headers)

    for response in (get_response, put_response, delete_response):
        assert response.status_code == 404
        assert response.json()["message"] == "Task not found"


async def test_update_task_changes_only_supplied_fields(client: AsyncClient, create_task, register_user) -> None:
    user = await register_user()
    task = await create_task(user, title="Original title", description="keep me", priority="Low")

    response = await client.put(
        f"/api/tasks/{task['id']}",
        json={"status": "in progress", "owner_id": str(PydanticObjectId()), "unknown": "ignored"},
        headers=user.headers,
    )

    assert response.status_code == 200, response.text
    updated = response.json()
    assert updated["status"] == "In Progress"
    assert updated["title"] == "Original title"
    assert updated["description"] == "keep me"
    assert updated["priority"] == "Low"
    assert updated["owner_id"] == user.id


async def test_update_task_without_fields_is_rejected(client: AsyncClient, create_task, register_user) -> None:
    user = await register_user()
    task = await create_task(user)

    empty = await client.put(f"/api/tasks/{task['id']}", json={}, headers=user.headers)
    unknown_only = await client.put(f"/api/tasks/{task['id']}", json={"colour": "red"}, headers=user.headers)

    for response in (empty, unknown_only):
        assert response.status_code == 400
        assert response.json()["message"] == "No fields to update"


async def test_update_task_validates_supplied_fields(client: AsyncClient, create_task, register_user) -> None:
    user = await register_user()
    task = await create_task(user)

    short_title = await client.put(f"/api/tasks/{task['id']}", json={"title": "no"}, headers=user.headers)
    bad_priority = await client.put(f"/api/tasks/{task['id']}", json={"priority": "later"}, headers=user.headers)

    assert short_title.status_code == 400
    assert short_title.json()["message"] == "Title must be at least 3 characters"
    assert bad_priority.status_code == 400
    assert bad_priority.json()["message"] == "Invalid priority value"

    unchanged = await client.get(f"/api/tasks/{task['id']}", headers=user.headers)
    assert _without_timestamps(unchanged.json()) == _without_timestamps(task)


async def test_delete_task_is_not_repeatable(client: AsyncClient, create_task, register_user) -> None:
    user = await register_user()
    task = await create_task(user)

    first = await client.delete(f"/api/tasks/{task['id']}", headers=user.headers)
    second = await client.delete(f"/api/tasks/{task['id']}", headers=user.headers)

    assert first.status_code == 204
    assert first.content == b""
    assert second.status_code == 404
    assert (await client.get(f"/api/tasks/{task['id']}", headers=user.headers)).status_code == 404


async def test_tasks_are_isolated_between_owners(client: AsyncClient, create_task, register_user) -> None:
    alice = await register_user(email="alice@example.com")
    bob = await register_user(email="bob@example.com")
    task = await create_task(alice, title="Alice only")

    listing = await client.get("/api/tasks", headers=bob.headers)
    fetch = await client.get(f"/api/tasks/{task['id']}", headers=bob.headers)
    update = await client.put(f"/api/tasks/{task['id']}", json={"title": "Hijacked"}, headers=bob.headers)
    delete = await client.delete(f"/api/tasks/{task['id']}", headers=bob.headers)

    assert listing.json() == []
    for response in (fetch, update, delete):
        assert response.status_code == 404
        assert response.json()["message"] == "Task not found"

    still_there = await client.get(f"/api/tasks/{task['id']}", headers=alice.headers)
    assert still_there.status_code == 200
    assert still_there.json()["title"] == "Alice only"


async def test_list_tasks_filters_by_status_synonym(client: AsyncClient, create_task, register_user) -> None:
    user = await register_user()
    await create_task(user, title="Open item")
    finished = await create_task(user, title="Closed item", status="Completed")

    response = await client.get("/api/tasks", params={"status": "done"}, headers=user.headers)

    assert response.status_code == 200
    assert [task["id"] for task in response.json()] == [finished["id"]]


async def test_list_tasks_rejects_unknown_status_filter(client: AsyncClient, register_user) -> None:
    user = await register_user()

    response = await client.get("/api/tasks", params={"status": "someday"}, headers=user.headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid status value"


async def test_list_tasks_searches_titles_case_insensitively(
    client: AsyncClient,
    create_task,
    register_user,
) -> None:
    user = await register_user()
    await create_task(user, title="Pay rent")
    await create_task(user, title="Call the PLUMBER")
    await create_task(user, title="Fix plumbing (urgent)")

    plumb = await client.get("/api/tasks", params={"q": "plumb"}, headers=user.headers)
    literal = await client.get("/api/tasks", params={"q": "(urgent)"}, headers=user.headers)

    assert sorted(task["title"] for task in plumb.json()) == ["Call the PLUMBER", "Fix plumbing (urgent)"]
    assert [task["title"] for task in literal.json()] == ["Fix plumbing (urgent)"]


async def test_list_tasks_sort_orders(client: AsyncClient, create_task, register_user) -> None:
    user = await register_user()
    await create_task(user, title="Low one", priority="Low")
    await create_task(user, title="High one", priority="High")
    await create_task(user, title="Medium one", priority="Medium")
    await create_task(user, title="High two", priority="High")

    async def titles(sort: str) -> list[str]:
        response = await client.get("/api/tasks", params={"sort": sort}, headers=user.headers)
        assert response.status_code == 200
        return [task["title"] for task in response.json()]

    assert await titles("oldest") == ["Low one", "High one", "Medium one", "High two"]
    assert await titles("newest") == ["High two", "Medium one", "High one", "Low one"]
    assert await titles("priority-high") == ["High two", "High one", "Medium one", "Low one"]
    assert await titles("priority-low") == ["Low one", "Medium one", "High two", "High one"]


async def test_list_tasks_rejects_unknown_sort(client: AsyncClient, register_user) -> None:
    user = await register_user()

    response = await client.get("/api/tasks", params={"sort": "alphabetical"}, headers=user.headers)

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


async def test_task_statistics_counts_every_status(client: AsyncClient, create_task, register_user) -> None:
    user = await register_user()
    other = await register_user()
    await create_task(user, title="One", status="pending")
    await create_task(user, title="Two", status="todo")
    await create_task(user, title="Three", status="done")
    await create_task(other, title="Not mine", status="progress")

    response = await client.get("/api/tasks/statistics", headers=user.headers)

    assert response.status_code == 200
    assert response.json() == {
        "total": 3,
        "by_status": {"Pending": 2, "In Progress": 0, "Completed": 1},
    }


async def test_health_reports_uptime(client: AsyncClient) -> None:
    response = await client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["uptime"] >= 0
