"""Schemas describing authentication payloads.

Request fields are optional at the schema level so that missing values are
reported with the service's own messages rather than generic parser errors.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .user import UserPublic


class RegisterRequest(BaseModel):
    """Incoming payload for registering a new user."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Jane Example",
                "email": "jane@example.com",
                "password": "s3cret-pass",
            }
        }
    )

    name: str | None = None
    email: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    """Credentials submitted to obtain a bearer token."""

    model_config = ConfigDict(
        json_schema_extra={"example": {"email": "jane@example.com", "password": "s3cret-pass"}}
    )

    email: str | None = None
    password: str | None = None


class AuthResponse(BaseModel):
    """Issued bearer token plus the authenticated user's summary."""

    token: str = Field(description="Signed bearer token valid for seven days")
    user: UserPublic


__all__ = ["AuthResponse", "LoginRequest", "RegisterRequest"]
