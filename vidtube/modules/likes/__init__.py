"""Likes on videos, comments and tweets."""

from .service import TARGETS, LikeService

__all__ = ["LikeService", "TARGETS"]
