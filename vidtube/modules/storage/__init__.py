"""
Storage Module - Black Box Interface

Purpose: Abstract all data persistence
Interface: StorageModule.connect(), DocumentStore, UserStore
Hidden: MongoDB driver specifics, connection pooling, index management

Can be replaced with any document store exposing the same operations
without affecting other modules.
"""

import logging
from typing import Optional

from pymongo import ASCENDING, AsyncMongoClient

from .collections import COMMENTS, LIKES, PLAYLISTS, SUBSCRIPTIONS, TWEETS, USERS, VIDEOS
from .guards import page_window, require_document, require_owned
from .ids import to_object_id
from .store import Document, DocumentStore, utcnow
from .users import PUBLIC_PROJECTION, UserStore

logger = logging.getLogger(__name__)


def like_once(target: str) -> dict:
    """Unique index options limited to likes that carry the target field."""
    return {"unique": True, "partialFilterExpression": {target: {"$exists": True}}}

# (collection, keys, options)
INDEXES = [
    (USERS, [("username", ASCENDING)], {"unique": True}),
    (USERS, [("email", ASCENDING)], {"unique": True}),
    (USERS, [("full_name", ASCENDING)], {}),
    (SUBSCRIPTIONS, [("subscriber", ASCENDING), ("channel", ASCENDING)], {"unique": True}),
    (SUBSCRIPTIONS, [("channel", ASCENDING)], {}),
    (VIDEOS, [("owner", ASCENDING), ("created_at", ASCENDING)], {}),
    (COMMENTS, [("video", ASCENDING), ("created_at", ASCENDING)], {}),
    (LIKES, [("liked_by", ASCENDING)], {}),
    # One like per user and target
    (LIKES, [("liked_by", ASCENDING), ("video", ASCENDING)], like_once("video")),
    (LIKES, [("liked_by", ASCENDING), ("comment", ASCENDING)], like_once("comment")),
    (LIKES, [("liked_by", ASCENDING), ("tweet", ASCENDING)], like_once("tweet")),
    (LIKES, [("video", ASCENDING)], {}),
    (LIKES, [("comment", ASCENDING)], {}),
    (LIKES, [("tweet", ASCENDING)], {}),
    (TWEETS, [("owner", ASCENDING)], {}),
    (PLAYLISTS, [("owner", ASCENDING)], {}),
]


class StorageModule:
    """Black box storage connection owner."""

    def __init__(self, uri: str, database: str):
        """Initialize storage with connection URI and database name."""
        self.uri = uri
        self.database = database
        self._client: Optional[AsyncMongoClient] = None

    async def connect(self) -> DocumentStore:
        """Open the connection pool and return a DocumentStore over it."""
        if not self._client:
            self._client = AsyncMongoClient(self.uri, tz_aware=True)
            logger.info(f"MongoDB client created for database '{self.database}'")
        return DocumentStore(self._client[self.database])

    async def ensure_indexes(self, store: DocumentStore) -> None:
        """Create the indexes the uniqueness and join invariants rely on."""
        for collection, keys, options in INDEXES:
            await store.collection(collection).create_index(keys, **options)
        logger.info(f"Ensured {len(INDEXES)} indexes")

    async def disconnect(self):
        """Close the connection pool."""
        if self._client:
            await self._client.close()
            self._client = None


__all__ = [
    "COMMENTS",
    "Document",
    "DocumentStore",
    "LIKES",
    "PLAYLISTS",
    "PUBLIC_PROJECTION",
    "SUBSCRIPTIONS",
    "StorageModule",
    "TWEETS",
    "USERS",
    "UserStore",
    "VIDEOS",
    "page_window",
    "require_document",
    "require_owned",
    "to_object_id",
    "utcnow",
]
