"""User-facing Pydantic schemas."""

from __future__ import annotations

from beanie import PydanticObjectId
from pydantic import BaseModel, ConfigDict, Field


class UserPublic(BaseModel):
    """Public summary of an account: never includes the password hash."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "665f1c2e9b1e8a3d4c2b1a00",
                "name": "Jane Example",
                "email": "jane@example.com",
            }
        },
    )

    id: PydanticObjectId = Field(description="Opaque user identifier")
    name: str
    email: str


__all__ = ["UserPublic"]
