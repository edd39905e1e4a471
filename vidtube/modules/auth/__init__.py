"""
Authentication Module - Black Box Interface

Purpose: Hash passwords, issue/rotate session tokens, verify requests
Interface: PasswordHasher, TokenIssuer, SessionVerifier, AuthFactory.build()
Hidden: Token formats, signing keys, refresh-token bookkeeping

This module can be replaced with any other auth implementation
(external identity provider, opaque sessions) without affecting other modules.
"""

from .audit import AuditLog
from .factory import AuthFactory, AuthStack
from .passwords import PasswordHasher
from .tokens import SessionTokens, TokenIssuer
from .verifier import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    AuthenticatedUser,
    SessionVerifier,
    extract_bearer_token,
)

__all__ = [
    "ACCESS_COOKIE",
    "REFRESH_COOKIE",
    "AuditLog",
    "AuthFactory",
    "AuthStack",
    "AuthenticatedUser",
    "PasswordHasher",
    "SessionTokens",
    "SessionVerifier",
    "TokenIssuer",
    "extract_bearer_token",
]
