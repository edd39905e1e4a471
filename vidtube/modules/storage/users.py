"""
Credential store: persisted user records.

Owns the user document invariants:
- username and email are stored lowercase and trimmed, and are unique
- the password is hashed whenever (and only when) it is part of a write
- at most one refresh token is stored per user
"""

import logging
from typing import Any, Dict, Mapping, Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from vidtube.errors import ConflictError

from .collections import USERS
from .store import Document, DocumentStore

logger = logging.getLogger(__name__)

# Fields never returned to callers outside the auth module
PUBLIC_PROJECTION = {"password": 0, "refresh_token": 0}


def normalize_handle(value: Optional[str]) -> str:
    return (value or "").strip().lower()


class UserStore:
    """User persistence with automatic password hashing."""

    def __init__(self, store: DocumentStore, hasher):
        """
        Initialize user store.

        Args:
            store: DocumentStore for the users collection
            hasher: PasswordHasher applied to every password write
        """
        self.store = store
        self.hasher = hasher

    async def find_by_id(self, user_id: ObjectId, include_secrets: bool = False) -> Optional[Document]:
        projection = None if include_secrets else PUBLIC_PROJECTION
        return await self.store.find_by_id(USERS, user_id, projection)

    async def find_by_login(
        self, username: Optional[str] = None, email: Optional[str] = None
    ) -> Optional[Document]:
        """Find a user (with secrets) by username or email."""
        clauses = []
        if username and username.strip():
            clauses.append({"username": normalize_handle(username)})
        if email and email.strip():
            clauses.append({"email": normalize_handle(email)})
        if not clauses:
            return None
        return await self.store.find_one(USERS, {"$or": clauses})

    async def create(self, fields: Mapping[str, Any]) -> Document:
        """
        Create a user record.

        Raises:
            ConflictError: If username or email is already taken
        """
        username = normalize_handle(fields["username"])
        email = normalize_handle(fields["email"])

        existing = await self.store.find_one(
            USERS, {"$or": [{"username": username}, {"email": email}]}, {"_id": 1}
        )
        if existing:
            raise ConflictError("User with email or username already exists")

        document: Dict[str, Any] = {
            "username": username,
            "email": email,
            "full_name": (fields.get("full_name") or "").strip(),
            "avatar": fields["avatar"],
            "cover_image": fields.get("cover_image") or "",
            "password": await self.hasher.hash_async(fields["password"]),
            "refresh_token": None,
            "watch_history": [],
            "videos": [],
            "tweets": [],
        }

        try:
            created = await self.store.insert(USERS, document)
        except DuplicateKeyError:
            # Lost a race with a concurrent registration
            raise ConflictError("User with email or username already exists")

        logger.info(f"Created user {created['_id']} ({document['username']})")
        return created

    async def update_fields(self, user_id: ObjectId, fields: Mapping[str, Any]) -> Optional[Document]:
        """
        Update profile fields on a user.

        The password is hashed only if it is one of the fields being written.

        Returns:
            Updated user without secrets, or None if the user does not exist
        """
        changes = dict(fields)
        if "password" in changes:
            changes["password"] = await self.hasher.hash_async(changes["password"])
        if "email" in changes:
            changes["email"] = normalize_handle(changes["email"])
        if "username" in changes:
            changes["username"] = normalize_handle(changes["username"])

        try:
            return await self.store.update_by_id(
                USERS, user_id, {"$set": changes}, projection=PUBLIC_PROJECTION
            )
        except DuplicateKeyError:
            raise ConflictError("User with email or username already exists")

    async def set_password(self, user_id: ObjectId, plaintext: str) -> bool:
        updated = await self.update_fields(user_id, {"password": plaintext})
        return updated is not None

    async def set_refresh_token(self, user_id: ObjectId, token: str) -> bool:
        """Overwrite the stored refresh token (single-field write)."""
        return await self.store.update_one(
            USERS, {"_id": user_id}, {"$set": {"refresh_token": token}}
        )

    async def swap_refresh_token(self, user_id: ObjectId, expected: str, token: str) -> bool:
        """
        Replace the stored refresh token only if it still equals expected.

        Returns:
            True if the swap happened, False if another writer got there first
        """
        return await self.store.update_one(
            USERS,
            {"_id": user_id, "refresh_token": expected},
            {"$set": {"refresh_token": token}},
        )

    async def clear_refresh_token(self, user_id: ObjectId) -> bool:
        return await self.store.update_one(
            USERS, {"_id": user_id}, {"$set": {"refresh_token": None}}
        )

    async def add_reference(self, user_id: ObjectId, field: str, value: ObjectId) -> None:
        """Append to one of the back-reference lists (videos, tweets)."""
        await self.store.update_one(USERS, {"_id": user_id}, {"$addToSet": {field: value}})

    async def remove_reference(self, user_id: ObjectId, field: str, value: ObjectId) -> None:
        await self.store.update_one(USERS, {"_id": user_id}, {"$pull": {field: value}})

    async def record_watch(self, user_id: ObjectId, video_id: ObjectId) -> None:
        """Move video_id to the end of the user's watch history in one write."""
        await self.store.update_one(
            USERS,
            {"_id": user_id},
            [
                {
                    "$set": {
                        "watch_history": {
                            "$concatArrays": [
                                {
                                    "$filter": {
                                        "input": {"$ifNull": ["$watch_history", []]},
                                        "cond": {"$ne": ["$$this", video_id]},
                                    }
                                },
                                [video_id],
                            ]
                        }
                    }
                }
            ],
        )
