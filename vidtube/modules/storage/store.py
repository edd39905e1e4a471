"""
Thin async wrapper over a MongoDB database.

Every other module talks to the document store through this class so the
driver specifics (cursor handling, timestamps, return-document flags) stay
in one place.
"""

import logging
from datetime import UTC, datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from bson import ObjectId
from pymongo import ReturnDocument

logger = logging.getLogger(__name__)

Document = Dict[str, Any]
Update = Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]


def utcnow() -> datetime:
    return datetime.now(UTC)


def _with_updated_at(update: Update) -> Update:
    """Stamp updated_at on an update document or update pipeline."""
    now = utcnow()
    if isinstance(update, Mapping):
        stamped = dict(update)
        stamped["$set"] = {**stamped.get("$set", {}), "updated_at": now}
        return stamped
    return [*update, {"$set": {"updated_at": now}}]


class DocumentStore:
    """
    Collection-level operations used by the rest of the application.

    Provides find-by-field, find-by-id, create, update-by-id, delete-by-id
    and aggregation-pipeline execution over named collections.
    """

    def __init__(self, database):
        """
        Initialize document store.

        Args:
            database: pymongo AsyncDatabase (or any object exposing the same API)
        """
        self.db = database

    def collection(self, name: str):
        return self.db[name]

    async def ping(self) -> bool:
        """Check that the database answers."""
        await self.db.command("ping")
        return True

    async def find_by_id(
        self, collection: str, document_id: ObjectId, projection: Optional[Mapping[str, Any]] = None
    ) -> Optional[Document]:
        return await self.collection(collection).find_one({"_id": document_id}, projection)

    async def find_one(
        self,
        collection: str,
        filter: Mapping[str, Any],
        projection: Optional[Mapping[str, Any]] = None,
    ) -> Optional[Document]:
        return await self.collection(collection).find_one(filter, projection)

    async def find_many(
        self,
        collection: str,
        filter: Mapping[str, Any],
        projection: Optional[Mapping[str, Any]] = None,
        sort: Optional[List[tuple]] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[Document]:
        cursor = self.collection(collection).find(filter, projection)
        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return await cursor.to_list(length=None)

    async def count(self, collection: str, filter: Mapping[str, Any]) -> int:
        return await self.collection(collection).count_documents(filter)

    async def insert(self, collection: str, document: Mapping[str, Any]) -> Document:
        """
        Insert a document, stamping created_at/updated_at.

        Returns:
            The stored document including its generated _id
        """
        now = utcnow()
        stored = {**document, "created_at": now, "updated_at": now}
        result = await self.collection(collection).insert_one(stored)
        stored["_id"] = result.inserted_id
        logger.debug(f"Inserted {collection}/{result.inserted_id}")
        return stored

    async def update_by_id(
        self,
        collection: str,
        document_id: ObjectId,
        update: Update,
        projection: Optional[Mapping[str, Any]] = None,
    ) -> Optional[Document]:
        """
        Apply an update to a single document.

        Returns:
            The updated document, or None if no document has that id
        """
        return await self.collection(collection).find_one_and_update(
            {"_id": document_id},
            _with_updated_at(update),
            projection=projection,
            return_document=ReturnDocument.AFTER,
        )

    async def update_one(self, collection: str, filter: Mapping[str, Any], update: Update) -> bool:
        """
        Apply an update to the first document matching filter.

        This is atomic for a single document, which makes it usable as a
        compare-and-swap when filter pins the expected current value.

        Returns:
            True if a document matched the filter
        """
        result = await self.collection(collection).update_one(filter, _with_updated_at(update))
        return result.matched_count == 1

    async def update_many(self, collection: str, filter: Mapping[str, Any], update: Update) -> int:
        """Apply an update to every matching document; returns the modified count."""
        result = await self.collection(collection).update_many(filter, _with_updated_at(update))
        return result.modified_count

    async def delete_by_id(self, collection: str, document_id: ObjectId) -> Optional[Document]:
        """Delete a document and return it, or None if it did not exist."""
        return await self.collection(collection).find_one_and_delete({"_id": document_id})

    async def delete_one(self, collection: str, filter: Mapping[str, Any]) -> bool:
        result = await self.collection(collection).delete_one(filter)
        return result.deleted_count == 1

    async def delete_many(self, collection: str, filter: Mapping[str, Any]) -> int:
        result = await self.collection(collection).delete_many(filter)
        return result.deleted_count

    async def aggregate(self, collection: str, pipeline: List[Mapping[str, Any]]) -> List[Document]:
        """Run an aggregation pipeline and return every resulting document."""
        cursor = await self.collection(collection).aggregate(pipeline)
        return await cursor.to_list(length=None)
