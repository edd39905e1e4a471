"""Accounts: registration, sessions and profile management."""

from .service import AccountService

__all__ = ["AccountService"]
