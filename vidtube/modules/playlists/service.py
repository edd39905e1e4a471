"""
User playlists.

A playlist keeps an ordered list of video ids; adding a video that is
already present is a no-op.
"""

import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId

from vidtube.errors import BadRequestError, NotFoundError
from vidtube.modules.aggregation import AggregationQueries
from vidtube.modules.storage import (
    PLAYLISTS,
    VIDEOS,
    DocumentStore,
    UserStore,
    require_document,
    require_owned,
)

logger = logging.getLogger(__name__)


class PlaylistService:
    """Playlist CRUD and membership."""

    def __init__(self, store: DocumentStore, users: UserStore, queries: AggregationQueries):
        self.store = store
        self.users = users
        self.queries = queries

    async def create_playlist(
        self, owner_id: ObjectId, name: Optional[str], description: Optional[str]
    ) -> Dict[str, Any]:
        if not name or not name.strip():
            raise BadRequestError("Playlist name is required")

        playlist = await self.store.insert(
            PLAYLISTS,
            {
                "name": name.strip(),
                "description": (description or "").strip(),
                "videos": [],
                "owner": owner_id,
            },
        )
        logger.debug(f"User {owner_id} created playlist {playlist['_id']}")
        return playlist

    async def get_playlist(self, playlist_id: ObjectId, viewer_id: ObjectId) -> Dict[str, Any]:
        return await self.queries.playlist(playlist_id, viewer_id)

    async def user_playlists(self, user_id: ObjectId) -> List[Dict[str, Any]]:
        if not await self.users.find_by_id(user_id):
            raise NotFoundError("User not found")
        return await self.queries.user_playlists(user_id)

    async def update_playlist(
        self,
        playlist_id: ObjectId,
        actor_id: ObjectId,
        name: Optional[str],
        description: Optional[str],
    ) -> Dict[str, Any]:
        """
        Rename a playlist and/or change its description.

        Raises:
            NotFoundError: If the playlist does not exist
            ForbiddenError: If the actor does not own it
            BadRequestError: If neither field is provided
        """
        await require_owned(self.store, PLAYLISTS, playlist_id, actor_id, "Playlist")

        changes: Dict[str, Any] = {}
        if name and name.strip():
            changes["name"] = name.strip()
        if description is not None:
            changes["description"] = description.strip()
        if not changes:
            raise BadRequestError("Name or description is required")

        return await self._apply(playlist_id, {"$set": changes})

    async def delete_playlist(self, playlist_id: ObjectId, actor_id: ObjectId) -> None:
        await require_owned(self.store, PLAYLISTS, playlist_id, actor_id, "Playlist")
        await self.store.delete_by_id(PLAYLISTS, playlist_id)

    async def add_video(self, video_id: ObjectId, playlist_id: ObjectId, actor_id: ObjectId) -> Dict[str, Any]:
        await require_owned(self.store, PLAYLISTS, playlist_id, actor_id, "Playlist")
        await require_document(self.store, VIDEOS, video_id, "Video", {"_id": 1})
        return await self._apply(playlist_id, {"$addToSet": {"videos": video_id}})

    async def remove_video(self, video_id: ObjectId, playlist_id: ObjectId, actor_id: ObjectId) -> Dict[str, Any]:
        playlist = await require_owned(self.store, PLAYLISTS, playlist_id, actor_id, "Playlist")
        if video_id not in playlist.get("videos", []):
            raise NotFoundError("Video is not in this playlist")
        return await self._apply(playlist_id, {"$pull": {"videos": video_id}})

    async def _apply(self, playlist_id: ObjectId, update: Dict[str, Any]) -> Dict[str, Any]:
        playlist = await self.store.update_by_id(PLAYLISTS, playlist_id, update)
        if not playlist:
            raise NotFoundError("Playlist not found")
        return playlist
