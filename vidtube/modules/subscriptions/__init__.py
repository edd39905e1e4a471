"""Subscriptions between users and channels."""

from .service import SubscriptionService

__all__ = ["SubscriptionService"]
