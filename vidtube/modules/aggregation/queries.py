"""
Aggregation query executor.

Runs the pipelines built in pipelines.py against the document store and
turns "no document" outcomes into NotFound where a single result is expected.
"""

import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId

from vidtube.errors import NotFoundError
from vidtube.modules.storage import DocumentStore

from . import pipelines

logger = logging.getLogger(__name__)


class AggregationQueries:
    """Relational-style reads composed from $lookup pipelines."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def _first(self, collection: str, pipeline: pipelines.Pipeline) -> Optional[Dict[str, Any]]:
        results = await self.store.aggregate(collection, pipeline)
        return results[0] if results else None

    async def channel_profile(self, username: str, viewer_id: Optional[ObjectId]) -> Dict[str, Any]:
        """
        Public channel page for a username.

        Raises:
            NotFoundError: If no user has that username
        """
        channel = await self._first("users", pipelines.channel_profile_pipeline(username, viewer_id))
        if not channel:
            raise NotFoundError("Channel does not exist")
        return channel

    async def watch_history(self, user_id: ObjectId) -> List[Dict[str, Any]]:
        """Watched videos in stored order; empty when nothing was watched."""
        result = await self._first("users", pipelines.watch_history_pipeline(user_id))
        if not result:
            return []
        return result.get("watch_history", [])

    async def playlist(self, playlist_id: ObjectId, viewer_id: Optional[ObjectId]) -> Dict[str, Any]:
        """
        A hydrated playlist. Unpublished videos are listed only for their owner.

        Raises:
            NotFoundError: If the playlist does not exist
        """
        playlist = await self._first("playlists", pipelines.playlist_pipeline(playlist_id, viewer_id))
        if not playlist:
            raise NotFoundError("Playlist not found")
        return playlist

    async def user_playlists(self, user_id: ObjectId) -> List[Dict[str, Any]]:
        return await self.store.aggregate("users", pipelines.user_playlists_pipeline(user_id))

    async def video_detail(self, video_id: ObjectId, viewer_id: Optional[ObjectId]) -> Dict[str, Any]:
        """
        A video with owner profile and like information.

        Raises:
            NotFoundError: If the video does not exist
        """
        video = await self._first("videos", pipelines.video_detail_pipeline(video_id, viewer_id))
        if not video:
            raise NotFoundError("Video not found")
        return video

    async def video_comments(self, video_id: ObjectId, page: int, limit: int) -> List[Dict[str, Any]]:
        return await self.store.aggregate(
            "comments", pipelines.video_comments_pipeline(video_id, page, limit)
        )

    async def liked_videos(self, user_id: ObjectId) -> List[Dict[str, Any]]:
        return await self.store.aggregate("likes", pipelines.liked_videos_pipeline(user_id))

    async def user_tweets(self, owner_id: ObjectId) -> List[Dict[str, Any]]:
        return await self.store.aggregate("tweets", pipelines.user_tweets_pipeline(owner_id))

    async def channel_subscribers(self, channel_id: ObjectId) -> List[Dict[str, Any]]:
        return await self.store.aggregate(
            "subscriptions", pipelines.channel_subscribers_pipeline(channel_id)
        )

    async def subscribed_channels(self, subscriber_id: ObjectId) -> List[Dict[str, Any]]:
        return await self.store.aggregate(
            "subscriptions", pipelines.subscribed_channels_pipeline(subscriber_id)
        )

    async def channel_stats(self, channel_id: ObjectId) -> Dict[str, Any]:
        """Video/view/like totals plus the subscriber count for a channel."""
        totals = await self._first("videos", pipelines.channel_stats_pipeline(channel_id))
        stats = {"total_videos": 0, "total_views": 0, "total_likes": 0}
        if totals:
            stats.update(totals)
        stats["total_subscribers"] = await self.store.count("subscriptions", {"channel": channel_id})
        return stats
