"""Comments on videos."""

from .service import CommentService

__all__ = ["CommentService"]
