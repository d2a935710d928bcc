"""Repository for user documents."""

from __future__ import annotations

from ..models import User
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Lookup and insert operations on ``User`` documents."""

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_email(self, email: str) -> User | None:
        """Return the user registered under ``email`` (already normalised)."""
        return await User.find_one(User.email == email)


__all__ = ["UserRepository"]
