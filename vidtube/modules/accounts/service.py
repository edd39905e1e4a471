"""
Account operations: registration, login, session refresh and profile edits.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId

from vidtube.errors import BadRequestError, ConflictError, NotFoundError, UnauthorizedError
from vidtube.modules.aggregation import AggregationQueries
from vidtube.modules.auth import PasswordHasher, SessionTokens, TokenIssuer
from vidtube.modules.storage import UserStore

logger = logging.getLogger(__name__)


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class AccountService:
    """User-facing account workflows."""

    def __init__(
        self,
        users: UserStore,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        queries: AggregationQueries,
        blobs,
    ):
        """
        Initialize account service.

        Args:
            users: UserStore for user records
            hasher: PasswordHasher used to check login and old passwords
            issuer: TokenIssuer for session pairs
            queries: AggregationQueries for channel/history reads
            blobs: CloudinaryBlobStore for avatar and cover uploads
        """
        self.users = users
        self.hasher = hasher
        self.issuer = issuer
        self.queries = queries
        self.blobs = blobs

    async def register(
        self,
        username: Optional[str],
        email: Optional[str],
        full_name: Optional[str],
        password: Optional[str],
        avatar_path: Optional[str],
        cover_image_path: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Register a new user.

        Uniqueness is checked before any upload so a conflicting registration
        never reaches the media host or the users collection.

        Raises:
            BadRequestError: If a field or the avatar is missing
            ConflictError: If the username or email is taken
        """
        if any(_blank(value) for value in (username, email, full_name, password)):
            raise BadRequestError("All fields are required")

        if await self.users.find_by_login(username=username, email=email):
            raise ConflictError("User with email or username already exists")

        if not avatar_path:
            raise BadRequestError("Avatar file is required")

        avatar = await self.blobs.upload(avatar_path)
        cover_image = await self.blobs.upload(cover_image_path) if cover_image_path else None

        created = await self.users.create(
            {
                "username": username,
                "email": email,
                "full_name": full_name,
                "password": password,
                "avatar": avatar["url"],
                "cover_image": cover_image["url"] if cover_image else "",
            }
        )

        user = await self.users.find_by_id(created["_id"])
        if not user:
            raise NotFoundError("User not found")
        return user

    async def login(
        self, username: Optional[str], email: Optional[str], password: Optional[str]
    ) -> Tuple[Dict[str, Any], SessionTokens]:
        """
        Check credentials and open a session.

        Raises:
            BadRequestError: If neither username nor email is given
            NotFoundError: If no such user exists
            UnauthorizedError: If the password does not match
        """
        if _blank(username) and _blank(email):
            raise BadRequestError("Username or email is required")

        record = await self.users.find_by_login(username=username, email=email)
        if not record:
            raise NotFoundError("User does not exist")

        if not await self.hasher.verify_async(password or "", record.get("password", "")):
            logger.info(f"Failed login for user {record['_id']}")
            raise UnauthorizedError("Invalid user credentials")

        tokens = await self.issuer.issue_session_pair(record["_id"])
        user = await self.users.find_by_id(record["_id"])
        logger.info(f"User {record['_id']} logged in")
        return user, tokens

    async def logout(self, user_id: ObjectId) -> None:
        await self.issuer.revoke(user_id)

    async def refresh(self, presented: Optional[str]) -> SessionTokens:
        return await self.issuer.rotate(presented)

    async def change_password(
        self, user_id: ObjectId, old_password: Optional[str], new_password: Optional[str]
    ) -> None:
        """
        Replace the password after checking the current one.

        Raises:
            BadRequestError: If a password is missing or the old one is wrong
        """
        if _blank(old_password) or _blank(new_password):
            raise BadRequestError("Old and new password are required")

        record = await self.users.find_by_id(user_id, include_secrets=True)
        if not record:
            raise NotFoundError("User not found")

        if not await self.hasher.verify_async(old_password, record.get("password", "")):
            raise BadRequestError("Invalid old password")

        await self.users.set_password(user_id, new_password)
        logger.info(f"Password changed for user {user_id}")

    async def update_details(
        self, user_id: ObjectId, full_name: Optional[str], email: Optional[str]
    ) -> Dict[str, Any]:
        """Update full name and email; both are required."""
        if _blank(full_name) or _blank(email):
            raise BadRequestError("All fields are required")

        user = await self.users.update_fields(
            user_id, {"full_name": full_name.strip(), "email": email}
        )
        if not user:
            raise NotFoundError("User not found")
        return user

    async def update_avatar(self, user_id: ObjectId, avatar_path: Optional[str]) -> Dict[str, Any]:
        if not avatar_path:
            raise BadRequestError("Avatar file is missing")
        return await self._replace_image(user_id, "avatar", avatar_path)

    async def update_cover_image(self, user_id: ObjectId, cover_path: Optional[str]) -> Dict[str, Any]:
        if not cover_path:
            raise BadRequestError("Cover image file is missing")
        return await self._replace_image(user_id, "cover_image", cover_path)

    async def _replace_image(self, user_id: ObjectId, field: str, local_path: str) -> Dict[str, Any]:
        asset = await self.blobs.upload(local_path)
        user = await self.users.update_fields(user_id, {field: asset["url"]})
        if not user:
            raise NotFoundError("User not found")
        return user

    async def channel_profile(self, username: Optional[str], viewer_id: Optional[ObjectId]) -> Dict[str, Any]:
        if _blank(username):
            raise BadRequestError("Username is missing")
        return await self.queries.channel_profile(username, viewer_id)

    async def watch_history(self, user_id: ObjectId) -> List[Dict[str, Any]]:
        return await self.queries.watch_history(user_id)
