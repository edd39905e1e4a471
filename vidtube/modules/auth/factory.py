"""
Authentication Factory following Black Box Design principles.

This factory:
- Constructs the authentication stack from configuration
- Wires dependencies together
- Returns a single bundle the API layer holds on to
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from vidtube.config.provider import TokenConfig
from vidtube.modules.storage import DocumentStore, UserStore

from .audit import AuditLog
from .passwords import DEFAULT_ROUNDS, PasswordHasher
from .tokens import TokenIssuer
from .verifier import SessionVerifier

logger = logging.getLogger(__name__)


@dataclass
class AuthStack:
    """Wired authentication components."""
    hasher: PasswordHasher
    users: UserStore
    issuer: TokenIssuer
    verifier: SessionVerifier
    audit: AuditLog


class AuthFactory:
    """
    Factory for building the authentication stack.

    This is the composition root that:
    - Creates all auth components
    - Wires them together via dependency injection
    """

    @staticmethod
    def build(
        token_config: TokenConfig,
        store: DocumentStore,
        redis_client: Optional[Any] = None,
        rounds: int = DEFAULT_ROUNDS,
    ) -> AuthStack:
        """
        Build the complete authentication stack.

        Args:
            token_config: Token secrets and lifetimes, loaded once at startup
            store: Document store holding the users collection
            redis_client: Optional Redis client for audit logging
            rounds: bcrypt cost factor

        Returns:
            AuthStack with every component wired
        """
        hasher = PasswordHasher(rounds=rounds)
        users = UserStore(store, hasher)
        audit = AuditLog(redis_client)
        issuer = TokenIssuer(token_config, users, audit)
        verifier = SessionVerifier(issuer, users)

        if redis_client:
            logger.info("Authentication stack built with Redis audit trail")
        else:
            logger.info("Authentication stack built with log-only audit trail")

        return AuthStack(hasher=hasher, users=users, issuer=issuer, verifier=verifier, audit=audit)
