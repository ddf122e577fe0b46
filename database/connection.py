"""
MongoDB connection handling.

Provides a scoped acquisition of the store:

    async with open_store(settings) as store:
        await store.insert_many("vendors", documents)

The client is pinged before the handle is yielded and is always closed when
the block exits, including on failure. There is no module-level client; the
DocumentStore handle is passed explicitly to everything that needs it.
"""

import logging
from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import OperationFailure, PyMongoError

from shared.config import Settings

logger = logging.getLogger(__name__)

# Server error code for "ns not found"
NAMESPACE_NOT_FOUND = 26


class StoreConnectionError(Exception):
    """Raised when the store cannot be reached or authenticated against."""

    pass


class ReferencedEntityNotFoundError(Exception):
    """Raised when a referenced document id does not resolve."""

    def __init__(self, collection: str, ids: Sequence[Any]):
        self.collection = collection
        self.ids = list(ids)
        super().__init__(
            f"{len(self.ids)} referenced id(s) not found in '{collection}': "
            f"{', '.join(str(i) for i in self.ids)}"
        )


class DocumentStore:
    """
    Thin async handle over one MongoDB database.

    Exposes only the operations the seeder needs: drop, insert, find, count
    and append-to-array. Driver errors propagate unchanged.
    """

    def __init__(self, database: AsyncDatabase):
        self._db = database

    @property
    def name(self) -> str:
        return self._db.name

    async def drop_collection(self, name: str) -> bool:
        """
        Drop a collection if it exists.

        Returns:
            True if the collection was dropped, False if it did not exist
        """
        existing = await self._db.list_collection_names()
        if name not in existing:
            logger.info(
                f"Collection '{name}' does not exist, skipping drop",
                extra={"collection": name},
            )
            return False

        try:
            await self._db.drop_collection(name)
        except OperationFailure as e:
            if e.code != NAMESPACE_NOT_FOUND:
                raise
            logger.info(
                f"Collection '{name}' vanished before drop, skipping",
                extra={"collection": name},
            )
            return False

        logger.info(f"Dropped collection '{name}'", extra={"collection": name})
        return True

    async def insert_many(
        self, name: str, documents: Sequence[Mapping[str, Any]]
    ) -> list[Any]:
        """Insert documents in one call and return their ids in order."""
        if not documents:
            return []
        result = await self._db[name].insert_many(list(documents))
        return list(result.inserted_ids)

    async def insert_one(self, name: str, document: Mapping[str, Any]) -> Any:
        result = await self._db[name].insert_one(document)
        return result.inserted_id

    async def find(
        self,
        name: str,
        filter: Mapping[str, Any] | None = None,
        projection: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        cursor = self._db[name].find(filter or {}, projection)
        return await cursor.to_list()

    async def count(self, name: str, filter: Mapping[str, Any] | None = None) -> int:
        return await self._db[name].count_documents(filter or {})

    async def push(self, name: str, owner_id: Any, field: str, values: Sequence[Any]) -> None:
        """
        Atomically append values to an array field of one document.

        Uses $push/$each so concurrent appends to the same document never
        lose updates.

        Raises:
            ReferencedEntityNotFoundError: If no document has _id == owner_id
        """
        result = await self._db[name].update_one(
            {"_id": owner_id},
            {"$push": {field: {"$each": list(values)}}},
        )
        if result.matched_count == 0:
            raise ReferencedEntityNotFoundError(name, [owner_id])


@asynccontextmanager
async def open_store(settings: Settings) -> AsyncIterator[DocumentStore]:
    """
    Connect to MongoDB, yield a DocumentStore and always close the client.

    Args:
        settings: Application settings (DB_CONNECTION, DB_NAME, timeout)

    Raises:
        StoreConnectionError: If the server cannot be reached or rejects
            the credentials
    """
    try:
        client: AsyncMongoClient = AsyncMongoClient(
            settings.DB_CONNECTION,
            serverSelectionTimeoutMS=settings.DB_SERVER_SELECTION_TIMEOUT_MS,
            tz_aware=True,
        )
    except PyMongoError as e:
        raise StoreConnectionError(f"Invalid MongoDB configuration: {e}") from e

    try:
        try:
            await client.admin.command("ping")
        except PyMongoError as e:
            raise StoreConnectionError(f"Cannot connect to MongoDB: {e}") from e

        database = client.get_default_database(default=settings.DB_NAME)
        logger.info(f"Connected to MongoDB database '{database.name}'")
        yield DocumentStore(database)
    finally:
        await client.close()
        logger.info("MongoDB connection closed")
