from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from itertools import count
from typing import Any
from uuid import uuid4

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from tasktracker.app.core.config import Settings
from tasktracker.app.main import create_app

TEST_PASSWORD = "StrongPass123!"


@dataclass(slots=True)
class RegisteredUser:
    id: str
    name: str
    email: str
    password: str
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="test",
        jwt_secret_key="test-signing-secret",
        mongo_database=f"tasktracker_test_{uuid4().hex[:8]}",
    )


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    application = create_app(settings, mongo_client=AsyncMongoMockClient(tz_aware=True))
    store = application.state.document_store
    # ASGITransport does not run lifespan events, so connect explicitly.
    await store.connect()
    try:
        yield application
    finally:
        await store.close()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as http_client:
        yield http_client


@pytest_asyncio.fixture
async def register_user(client: AsyncClient) -> Callable[..., Awaitable[RegisteredUser]]:
    counter = count()

    async def _factory(
        *,
        name: str = "Test User",
        email: str | None = None,
        password: str = TEST_PASSWORD,
    ) -> RegisteredUser:
        actual_email = email or f"user-{next(counter)}@example.com"
        response = await client.post(
            "/api/auth/register",
            json={"name": name, "email": actual_email, "password": password},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return RegisteredUser(
            id=body["user"]["id"],
            name=body["user"]["name"],
            email=body["user"]["email"],
            password=password,
            token=body["token"],
        )

    return _factory


@pytest_asyncio.fixture
async def create_task(client: AsyncClient) -> Callable[..., Awaitable[dict[str, Any]]]:
    async def _factory(user: RegisteredUser, **fields: Any) -> dict[str, Any]:
        payload = {"title": "Default task title", **fields}
        response = await client.post("/api/tasks", json=payload, headers=user.headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _factory
