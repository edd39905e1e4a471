"""Tests for token issuance, rotation and revocation."""

import asyncio
import json
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import jwt
import pytest
from bson import ObjectId

from vidtube.errors import NotFoundError, UnauthorizedError
from vidtube.modules.auth import AuditLog


def _decode(token, secret):
    return jwt.decode(token, secret, algorithms=["HS256"])


def _audit_types(redis_mock):
    return [json.loads(call.args[1])["type"] for call in redis_mock.lpush.call_args_list]


def test_access_token_claims(issuer, user, token_config):
    claims = _decode(issuer.issue_access_token(user), token_config.access_token_secret)

    assert claims["sub"] == str(user["_id"])
    assert claims["email"] == user["email"]
    assert claims["username"] == user["username"]
    assert claims["full_name"] == user["full_name"]
    assert claims["exp"] - claims["iat"] == int(token_config.access_token_expiry.total_seconds())


def test_refresh_token_carries_identity_only(issuer, user, token_config):
    claims = _decode(issuer.issue_refresh_token(user), token_config.refresh_token_secret)

    assert set(claims) == {"sub", "jti", "iat", "exp"}
    assert claims["sub"] == str(user["_id"])


def test_refresh_tokens_minted_together_differ(issuer, user):
    assert issuer.issue_refresh_token(user) != issuer.issue_refresh_token(user)


def test_tokens_are_not_interchangeable(issuer, user):
    with pytest.raises(UnauthorizedError):
        issuer.decode_access_token(issuer.issue_refresh_token(user))
    with pytest.raises(UnauthorizedError):
        issuer.decode_refresh_token(issuer.issue_access_token(user))


def test_expired_access_token(issuer, user, token_config):
    past = datetime.now(UTC) - timedelta(hours=2)
    token = jwt.encode(
        {"sub": str(user["_id"]), "iat": past, "exp": past + timedelta(minutes=1)},
        token_config.access_token_secret,
        algorithm="HS256",
    )

    with pytest.raises(UnauthorizedError, match="expired"):
        issuer.decode_access_token(token)


def test_garbage_token(issuer):
    with pytest.raises(UnauthorizedError, match="Invalid access token"):
        issuer.decode_access_token("not.a.jwt")


def test_token_with_non_objectid_subject(issuer, token_config):
    now = datetime.now(UTC)
    token = jwt.encode(
        {"sub": "root", "iat": now, "exp": now + timedelta(minutes=5)},
        token_config.access_token_secret,
        algorithm="HS256",
    )

    with pytest.raises(UnauthorizedError):
        issuer.decode_access_token(token)


@pytest.mark.asyncio
async def test_issue_session_pair_stores_refresh_token(issuer, user, user_store, redis_mock):
    tokens = await issuer.issue_session_pair(user["_id"])

    assert user_store.users[user["_id"]]["refresh_token"] == tokens.refresh_token
    assert user_store.writes == [("set_refresh_token", user["_id"])]
    assert "session_issued" in _audit_types(redis_mock)


@pytest.mark.asyncio
async def test_issue_session_pair_unknown_user(issuer, user_store):
    with pytest.raises(NotFoundError):
        await issuer.issue_session_pair(ObjectId())
    assert user_store.writes == []


@pytest.mark.asyncio
async def test_rotate_replaces_stored_token(issuer, user, user_store):
    first = await issuer.issue_session_pair(user["_id"])

    second = await issuer.rotate(first.refresh_token)

    assert second.refresh_token != first.refresh_token
    assert user_store.users[user["_id"]]["refresh_token"] == second.refresh_token


@pytest.mark.asyncio
async def test_rotate_same_token_only_once(issuer, user, redis_mock):
    first = await issuer.issue_session_pair(user["_id"])
    await issuer.rotate(first.refresh_token)

    with pytest.raises(UnauthorizedError, match="expired or used"):
        await issuer.rotate(first.refresh_token)
    assert "refresh_token_reuse_detected" in _audit_types(redis_mock)


@pytest.mark.asyncio
async def test_concurrent_rotations_single_winner(issuer, user):
    first = await issuer.issue_session_pair(user["_id"])

    results = await asyncio.gather(
        issuer.rotate(first.refresh_token),
        issuer.rotate(first.refresh_token),
        return_exceptions=True,
    )

    failures = [r for r in results if isinstance(r, UnauthorizedError)]
    assert len(failures) == 1
    assert len(results) - len(failures) == 1


@pytest.mark.asyncio
async def test_rotate_loses_compare_and_swap(issuer, user, user_store):
    first = await issuer.issue_session_pair(user["_id"])
    user_store.swap_refresh_token = AsyncMock(return_value=False)

    with pytest.raises(UnauthorizedError, match="expired or used"):
        await issuer.rotate(first.refresh_token)
    assert user_store.users[user["_id"]]["refresh_token"] == first.refresh_token


@pytest.mark.asyncio
@pytest.mark.parametrize("presented", [None, ""])
async def test_rotate_missing_token(issuer, user_store, presented):
    with pytest.raises(UnauthorizedError):
        await issuer.rotate(presented)
    assert user_store.reads == 0


@pytest.mark.asyncio
async def test_rotate_deleted_user(issuer, user, user_store):
    tokens = await issuer.issue_session_pair(user["_id"])
    del user_store.users[user["_id"]]

    with pytest.raises(UnauthorizedError, match="Invalid refresh token"):
        await issuer.rotate(tokens.refresh_token)


@pytest.mark.asyncio
async def test_revoke_blocks_refresh(issuer, user, user_store):
    tokens = await issuer.issue_session_pair(user["_id"])

    await issuer.revoke(user["_id"])

    assert user_store.users[user["_id"]]["refresh_token"] is None
    with pytest.raises(UnauthorizedError):
        await issuer.rotate(tokens.refresh_token)


@pytest.mark.asyncio
async def test_audit_survives_redis_failure(redis_mock):
    redis_mock.lpush.side_effect = ConnectionError("redis down")
    audit = AuditLog(redis_mock)

    await audit.record("session_issued", {"user_id": "x"})

    redis_mock.ltrim.assert_not_called()


@pytest.mark.asyncio
async def test_audit_trail_is_capped(audit, redis_mock):
    await audit.record("session_revoked", {"user_id": "x"})

    redis_mock.lpush.assert_awaited_once()
    redis_mock.ltrim.assert_awaited_once_with("auth:audit", 0, 9999)
