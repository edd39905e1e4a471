"""Videos: publishing, search, playback and lifecycle."""

from .service import SORT_FIELDS, VideoService

__all__ = ["SORT_FIELDS", "VideoService"]
