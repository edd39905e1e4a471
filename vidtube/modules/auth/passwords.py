"""
Password hashing with bcrypt.

Hashing is deliberately slow, so the async variants push the work to a
worker thread to keep the event loop responsive.
"""

import asyncio
import logging

import bcrypt

from vidtube.errors import BadRequestError

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 10
MAX_PASSWORD_BYTES = 72  # bcrypt only looks at the first 72 bytes


class PasswordHasher:
    """Salted one-way hashing and verification of user passwords."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        """
        Hash a plaintext password.

        Raises:
            BadRequestError: If the password is empty or longer than bcrypt supports
        """
        encoded = (plaintext or "").encode("utf-8")
        if not encoded:
            raise BadRequestError("Password is required")
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise BadRequestError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self.rounds)).decode("ascii")

    def verify(self, plaintext: str, digest: str) -> bool:
        """Check a plaintext password against a stored digest."""
        if not plaintext or not digest:
            return False
        encoded = plaintext.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, digest.encode("ascii"))
        except ValueError:
            logger.warning("Stored password digest is malformed")
            return False

    async def hash_async(self, plaintext: str) -> str:
        return await asyncio.to_thread(self.hash, plaintext)

    async def verify_async(self, plaintext: str, digest: str) -> bool:
        return await asyncio.to_thread(self.verify, plaintext, digest)
