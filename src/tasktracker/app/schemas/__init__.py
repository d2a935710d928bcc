"""Pydantic schemas for public interfaces."""

from __future__ import annotations

from .auth import AuthResponse, LoginRequest, RegisterRequest
from .system import ErrorResponse, HealthCheckResponse, RootResponse
from .task import TaskCreate, TaskRead, TaskStatistics, TaskUpdate
from .user import UserPublic

__all__ = [
    "AuthResponse",
    "ErrorResponse",
    "HealthCheckResponse",
    "LoginRequest",
    "RegisterRequest",
    "RootResponse",
    "TaskCreate",
    "TaskRead",
    "TaskStatistics",
    "TaskUpdate",
    "UserPublic",
]
