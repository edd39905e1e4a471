"""
Session verifier: the single authorization gate for protected endpoints.

Unauthenticated --(valid access token + existing user)--> Authenticated(user)

Any failure is terminal for the request; there is no anonymous fallback.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from bson import ObjectId

from vidtube.errors import UnauthorizedError

from .interfaces import CredentialStore

logger = logging.getLogger(__name__)

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity resolved for one request."""
    id: ObjectId
    username: str
    email: str
    full_name: str
    profile: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


def extract_bearer_token(
    cookies: Mapping[str, str], authorization: Optional[str]
) -> Optional[str]:
    """
    Pick the access credential from a request.

    The accessToken cookie takes precedence over the Authorization header.
    """
    token = cookies.get(ACCESS_COOKIE)
    if token:
        return token

    if authorization and authorization.startswith("Bearer "):
        token = authorization[7:].strip()
        return token or None

    return None


class SessionVerifier:
    """Authenticates inbound requests with a bearer access token."""

    def __init__(self, issuer, users: CredentialStore):
        """
        Initialize session verifier.

        Args:
            issuer: TokenIssuer providing access-token verification
            users: UserStore to load the referenced user
        """
        self.issuer = issuer
        self.users = users

    async def verify(self, token: Optional[str]) -> AuthenticatedUser:
        """
        Resolve the user behind an access token.

        Raises:
            UnauthorizedError: If the token is missing, invalid, expired, or the
                user no longer exists
        """
        if not token:
            raise UnauthorizedError("Unauthorized request")

        claims = self.issuer.decode_access_token(token)

        user = await self.users.find_by_id(ObjectId(claims["sub"]))
        if not user:
            logger.warning(f"Access token for missing user {claims['sub']}")
            raise UnauthorizedError("Invalid access token")

        return AuthenticatedUser(
            id=user["_id"],
            username=user.get("username", ""),
            email=user.get("email", ""),
            full_name=user.get("full_name", ""),
            profile=dict(user),
        )

    async def verify_request(
        self, cookies: Mapping[str, str], authorization: Optional[str]
    ) -> AuthenticatedUser:
        """Extract the credential from cookies/header and verify it."""
        return await self.verify(extract_bearer_token(cookies, authorization))
