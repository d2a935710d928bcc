"""User documents stored in MongoDB via beanie."""

from __future__ import annotations

from beanie import Document, Indexed
from pydantic import Field, field_validator

from .common import TimestampMixin

NAME_MAX_LENGTH = 255


class User(Document, TimestampMixin):
    """Registered account. ``email`` is unique at the collection level."""

    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    email: Indexed(str, unique=True)  # type: ignore[valid-type]
    hashed_password: str

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def _normalise_email(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    class Settings:
        name = "users"


__all__ = ["NAME_MAX_LENGTH", "User"]
