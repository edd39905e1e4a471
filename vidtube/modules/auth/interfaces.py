"""Authentication interfaces following Black Box Design principles."""
from typing import Any, Dict, Optional, Protocol

from bson import ObjectId


class CredentialStore(Protocol):
    """Protocol for the user persistence the auth module depends on."""

    async def find_by_id(self, user_id: ObjectId, include_secrets: bool = False) -> Optional[Dict[str, Any]]:
        ...

    async def set_refresh_token(self, user_id: ObjectId, token: str) -> bool:
        ...

    async def swap_refresh_token(self, user_id: ObjectId, expected: str, token: str) -> bool:
        """
        Atomically replace the stored refresh token if it equals expected.

        Returns:
            True if the swap happened
        """
        ...

    async def clear_refresh_token(self, user_id: ObjectId) -> bool:
        ...
