"""Playlists: ordered video collections owned by a user."""

from .service import PlaylistService

__all__ = ["PlaylistService"]
