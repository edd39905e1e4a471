"""Tweets: short channel posts."""

from .service import TweetService

__all__ = ["TweetService"]
