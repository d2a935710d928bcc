"""Shared helpers for beanie-backed repositories."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from beanie import Document, PydanticObjectId
from bson.errors import InvalidId

from ..errors import InvalidIdentifierError

DocumentType = TypeVar("DocumentType", bound=Document)


def parse_object_id(raw: Any, *, message: str = "Invalid id") -> PydanticObjectId:
    """Return ``raw`` as an ObjectId or raise :class:`InvalidIdentifierError`.

    Accepts only the canonical 24-character hex form.
    """

    if isinstance(raw, PydanticObjectId):
        return raw
    if not isinstance(raw, str) or len(raw) != 24:
        raise InvalidIdentifierError(message)
    try:
        return PydanticObjectId(raw)
    except (InvalidId, TypeError) as exc:
        raise InvalidIdentifierError(message) from exc


class BaseRepository(Generic[DocumentType]):
    """Provide shared persistence helpers for repositories."""

    def __init__(self, document_type: type[DocumentType]) -> None:
        self._document_type = document_type

    async def get(self, entity_id: PydanticObjectId) -> DocumentType | None:
        """Retrieve a document by its identifier."""
        return await self._document_type.get(entity_id)

    async def add(self, instance: DocumentType) -> DocumentType:
        """Insert a new document and return it with its assigned id."""
        await instance.insert()
        return instance


__all__ = ["BaseRepository", "DocumentType", "parse_object_id"]
