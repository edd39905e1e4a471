"""
Session token issuance and rotation.

Access tokens are short-lived and carry profile claims. Refresh tokens are
long-lived, carry only the subject, and exactly one of them is valid per user
at any time: issuing a new one overwrites the stored value, and rotation
refuses any token that is not the stored one.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Dict, Mapping, Optional

import jwt
from bson import ObjectId

from vidtube.config.provider import TokenConfig
from vidtube.errors import NotFoundError, UnauthorizedError

from .audit import AuditLog
from .interfaces import CredentialStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionTokens:
    """An access/refresh token pair."""
    access_token: str
    refresh_token: str


class TokenIssuer:
    """Creates, verifies and rotates signed session tokens."""

    def __init__(self, config: TokenConfig, users: CredentialStore, audit: Optional[AuditLog] = None):
        """
        Initialize token issuer.

        Args:
            config: Token secrets and lifetimes
            users: UserStore used to load users and persist refresh tokens
            audit: Optional audit log for session events
        """
        self.config = config
        self.users = users
        self.audit = audit or AuditLog()

    def issue_access_token(self, user: Mapping[str, Any]) -> str:
        """Sign an access token embedding the user's identity and profile claims."""
        now = datetime.now(UTC)
        claims = {
            "sub": str(user["_id"]),
            "email": user.get("email"),
            "username": user.get("username"),
            "full_name": user.get("full_name"),
            "iat": now,
            "exp": now + self.config.access_token_expiry,
        }
        return jwt.encode(claims, self.config.access_token_secret, algorithm=self.config.algorithm)

    def issue_refresh_token(self, user: Mapping[str, Any]) -> str:
        """Sign a refresh token embedding only the user's identity."""
        now = datetime.now(UTC)
        claims = {
            "sub": str(user["_id"]),
            # Distinguishes tokens minted for the same user within one second
            "jti": secrets.token_urlsafe(16),
            "iat": now,
            "exp": now + self.config.refresh_token_expiry,
        }
        return jwt.encode(claims, self.config.refresh_token_secret, algorithm=self.config.algorithm)

    def decode_access_token(self, token: str) -> Dict[str, Any]:
        """
        Verify an access token's signature and expiry.

        Raises:
            UnauthorizedError: If the token is malformed, badly signed or expired
        """
        return self._decode(token, self.config.access_token_secret, "access")

    def decode_refresh_token(self, token: str) -> Dict[str, Any]:
        """
        Verify a refresh token's signature and expiry.

        Raises:
            UnauthorizedError: If the token is malformed, badly signed or expired
        """
        return self._decode(token, self.config.refresh_token_secret, "refresh")

    def _decode(self, token: str, secret: str, kind: str) -> Dict[str, Any]:
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.config.algorithm],
                options={
                    "verify_signature": True,
                    "verify_exp": True,
                    "require": ["exp", "iat", "sub"],
                },
            )
        except jwt.ExpiredSignatureError:
            logger.debug(f"{kind} token expired")
            raise UnauthorizedError(f"{kind.capitalize()} token expired")
        except jwt.InvalidTokenError as e:
            logger.debug(f"Invalid {kind} token: {e}")
            raise UnauthorizedError(f"Invalid {kind} token")

        if not ObjectId.is_valid(claims["sub"]):
            raise UnauthorizedError(f"Invalid {kind} token")
        return claims

    async def issue_session_pair(self, user_id: ObjectId) -> SessionTokens:
        """
        Issue a fresh token pair and store the refresh token on the user.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self.users.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        tokens = SessionTokens(
            access_token=self.issue_access_token(user),
            refresh_token=self.issue_refresh_token(user),
        )
        await self.users.set_refresh_token(user["_id"], tokens.refresh_token)

        await self.audit.record("session_issued", {"user_id": str(user["_id"])})
        return tokens

    async def rotate(self, presented: Optional[str]) -> SessionTokens:
        """
        Exchange the current refresh token for a brand-new pair.

        Raises:
            UnauthorizedError: If the token is missing, invalid, expired, belongs
                to a user that no longer exists, or is not the stored token
        """
        if not presented:
            raise UnauthorizedError("Unauthorized request")

        claims = self.decode_refresh_token(presented)
        user = await self.users.find_by_id(ObjectId(claims["sub"]), include_secrets=True)
        if not user:
            raise UnauthorizedError("Invalid refresh token")

        stored = user.get("refresh_token")
        if not stored or not secrets.compare_digest(presented, stored):
            await self._reuse_detected(user["_id"])
            raise UnauthorizedError("Refresh token is expired or used")

        tokens = SessionTokens(
            access_token=self.issue_access_token(user),
            refresh_token=self.issue_refresh_token(user),
        )

        # Compare-and-swap: only succeeds if nobody rotated this token meanwhile
        swapped = await self.users.swap_refresh_token(user["_id"], presented, tokens.refresh_token)
        if not swapped:
            await self._reuse_detected(user["_id"])
            raise UnauthorizedError("Refresh token is expired or used")

        await self.audit.record("session_rotated", {"user_id": str(user["_id"])})
        return tokens

    async def revoke(self, user_id: ObjectId) -> None:
        """Forget the stored refresh token so no refresh can succeed."""
        await self.users.clear_refresh_token(user_id)
        await self.audit.record("session_revoked", {"user_id": str(user_id)})

    async def _reuse_detected(self, user_id: ObjectId) -> None:
        logger.warning(f"Superseded refresh token presented for user {user_id}")
        await self.audit.record("refresh_token_reuse_detected", {"user_id": str(user_id)})
