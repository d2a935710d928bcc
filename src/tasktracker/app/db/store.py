"""MongoDB connection lifecycle for the beanie document models."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from beanie import Document, init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from ..core.config import Settings
from ..models import DOCUMENT_MODELS

logger = logging.getLogger(__name__)


class DocumentStore:
    """Own the motor client and bind the document models to its database.

    One instance is created per application. Tests inject an in-memory client
    (``mongomock_motor``) through ``client``.
    """

    def __init__(
        self,
        *,
        url: str,
        database_name: str,
        client: AsyncIOMotorClient | None = None,
        document_models: Sequence[type[Document]] = tuple(DOCUMENT_MODELS),
    ) -> None:
        self._url = url
        self._database_name = database_name
        self._client = client
        self._owns_client = client is None
        self._document_models = list(document_models)
        self._initialized = False
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        client: AsyncIOMotorClient | None = None,
    ) -> "DocumentStore":
        return cls(url=settings.mongo_url, database_name=settings.mongo_database, client=client)

    async def connect(self) -> None:
        """Create the client if needed and run ``init_beanie`` (builds indexes)."""

        async with self._lock:
            if self._initialized:
                return
            if self._client is None:
                self._client = AsyncIOMotorClient(self._url, tz_aware=True, uuidRepresentation="standard")
            database = self._client[self._database_name]
            await init_beanie(database=database, document_models=self._document_models)
            self._initialized = True
            logger.info(
                "Document store connected",
                extra={"database": self._database_name, "models": [m.__name__ for m in self._document_models]},
            )

    async def close(self) -> None:
        """Close the client if this store created it."""

        client = self._client
        if client is not None and self._owns_client:
            client.close()
            self._client = None
        self._initialized = False


__all__ = ["DocumentStore"]
