"""Reusable FastAPI dependencies."""

from __future__ import annotations

from typing import Annotated

from beanie import PydanticObjectId
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .core.config import Settings
from .core.security import CredentialService, InvalidTokenError
from .errors import UnauthorizedError
from .services import AuthService, TaskService

_bearer_scheme = HTTPBearer(auto_error=False, description="Token issued by /api/auth/login")


def get_app_settings(request: Request) -> Settings:
    """Return the settings the running application was built with."""

    return request.app.state.settings


def get_credential_service(request: Request) -> CredentialService:
    return request.app.state.credentials


SettingsDependency = Annotated[Settings, Depends(get_app_settings)]
CredentialServiceDependency = Annotated[CredentialService, Depends(get_credential_service)]


async def get_current_user_id(
    credentials: CredentialServiceDependency,
    authorization: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> PydanticObjectId:
    """Resolve the bearer token to a user id.

    A missing header, a non-Bearer scheme, and an invalid or expired token all
    produce the same 401.
    """

    if authorization is None or not authorization.credentials:
        raise UnauthorizedError()
    try:
        return credentials.verify_token(authorization.credentials)
    except InvalidTokenError as exc:
        raise UnauthorizedError() from exc


CurrentUserIdDependency = Annotated[PydanticObjectId, Depends(get_current_user_id)]


def get_auth_service(credentials: CredentialServiceDependency) -> AuthService:
    return AuthService(credentials)


def get_task_service(user_id: CurrentUserIdDependency) -> TaskService:
    return TaskService(user_id)


AuthServiceDependency = Annotated[AuthService, Depends(get_auth_service)]
TaskServiceDependency = Annotated[TaskService, Depends(get_task_service)]


__all__ = [
    "AuthServiceDependency",
    "CredentialServiceDependency",
    "CurrentUserIdDependency",
    "SettingsDependency",
    "TaskServiceDependency",
    "get_app_settings",
    "get_credential_service",
    "get_current_user_id",
]
