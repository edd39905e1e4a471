"""
Shared pytest fixtures for VidTube tests.

This module provides common fixtures including:
- FakeUserStore: in-memory user records with real refresh-token semantics
- Token configuration and a wired issuer/verifier pair
- An AsyncMock-backed DocumentStore for service tests
"""

from datetime import timedelta
from typing import Any, Dict, List, Mapping, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId

from vidtube.config.provider import TokenConfig
from vidtube.modules.auth import AuditLog, PasswordHasher, SessionVerifier, TokenIssuer
from vidtube.modules.storage.users import PUBLIC_PROJECTION

TEST_PASSWORD = "correct horse battery"


class FakeUserStore:
    """
    In-memory replacement for UserStore.

    Mirrors the behaviour the auth module depends on: secrets are hidden
    unless asked for, and swap_refresh_token only writes when the stored
    value still equals the expected one.
    """

    def __init__(self, hasher: PasswordHasher):
        self.hasher = hasher
        self.users: Dict[ObjectId, Dict[str, Any]] = {}
        self.reads = 0
        self.writes: List[Tuple[str, ObjectId]] = []

    def add(self, username: str = "alice", password: str = TEST_PASSWORD, **fields) -> Dict[str, Any]:
        user = {
            "_id": ObjectId(),
            "username": username,
            "email": f"{username}@example.com",
            "full_name": username.capitalize(),
            "avatar": f"https://cdn.example.com/{username}.png",
            "cover_image": "",
            "password": self.hasher.hash(password),
            "refresh_token": None,
            "watch_history": [],
            **fields,
        }
        self.users[user["_id"]] = user
        return user

    async def find_by_id(self, user_id: ObjectId, include_secrets: bool = False) -> Optional[Dict[str, Any]]:
        self.reads += 1
        user = self.users.get(user_id)
        if user is None:
            return None
        document = dict(user)
        if not include_secrets:
            for field in PUBLIC_PROJECTION:
                document.pop(field, None)
        return document

    async def find_by_login(self, username: Optional[str] = None, email: Optional[str] = None):
        self.reads += 1
        for user in self.users.values():
            if (username and user["username"] == username.strip().lower()) or (
                email and user["email"] == email.strip().lower()
            ):
                return dict(user)
        return None

    async def set_refresh_token(self, user_id: ObjectId, token: str) -> bool:
        self.writes.append(("set_refresh_token", user_id))
        if user_id not in self.users:
            return False
        self.users[user_id]["refresh_token"] = token
        return True

    async def swap_refresh_token(self, user_id: ObjectId, expected: str, token: str) -> bool:
        self.writes.append(("swap_refresh_token", user_id))
        user = self.users.get(user_id)
        if user is None or user.get("refresh_token") != expected:
            return False
        user["refresh_token"] = token
        return True

    async def clear_refresh_token(self, user_id: ObjectId) -> bool:
        self.writes.append(("clear_refresh_token", user_id))
        if user_id not in self.users:
            return False
        self.users[user_id]["refresh_token"] = None
        return True

    async def update_fields(self, user_id: ObjectId, fields: Mapping[str, Any]):
        user = self.users.get(user_id)
        if user is None:
            return None
        changes = dict(fields)
        if "password" in changes:
            changes["password"] = self.hasher.hash(changes["password"])
        user.update(changes)
        return await self.find_by_id(user_id)

    async def set_password(self, user_id: ObjectId, plaintext: str) -> bool:
        return await self.update_fields(user_id, {"password": plaintext}) is not None


@pytest.fixture
def hasher():
    """Low-cost bcrypt hasher so tests stay fast."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_config():
    return TokenConfig(
        access_token_secret="access-secret-for-tests-0123456789",
        access_token_expiry=timedelta(minutes=15),
        refresh_token_secret="refresh-secret-for-tests-9876543210",
        refresh_token_expiry=timedelta(days=10),
    )


@pytest.fixture
def redis_mock():
    """Create a mock Redis client."""
    redis = AsyncMock()
    redis.lpush = AsyncMock()
    redis.ltrim = AsyncMock()
    return redis


@pytest.fixture
def audit(redis_mock):
    return AuditLog(redis_mock)


@pytest.fixture
def user_store(hasher):
    return FakeUserStore(hasher)


@pytest.fixture
def password():
    """Plaintext password of the stored user."""
    return TEST_PASSWORD


@pytest.fixture
def user(user_store):
    """A stored user with a known password."""
    return user_store.add("alice")


@pytest.fixture
def issuer(token_config, user_store, audit):
    return TokenIssuer(token_config, user_store, audit)


@pytest.fixture
def verifier(issuer, user_store):
    return SessionVerifier(issuer, user_store)


@pytest.fixture
def mock_store():
    """Create a mock DocumentStore."""
    store = MagicMock()
    store.find_by_id = AsyncMock(return_value=None)
    store.find_one = AsyncMock(return_value=None)
    store.find_many = AsyncMock(return_value=[])
    store.count = AsyncMock(return_value=0)
    store.insert = AsyncMock(side_effect=lambda collection, doc: {**doc, "_id": ObjectId()})
    store.update_by_id = AsyncMock(return_value=None)
    store.update_one = AsyncMock(return_value=True)
    store.update_many = AsyncMock(return_value=0)
    store.delete_by_id = AsyncMock(return_value=None)
    store.delete_one = AsyncMock(return_value=False)
    store.delete_many = AsyncMock(return_value=0)
    store.aggregate = AsyncMock(return_value=[])
    store.ping = AsyncMock(return_value=True)
    return store
