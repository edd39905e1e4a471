"""
Video publishing, listing and lifecycle.
"""

import logging
import math
import re
from typing import Any, Dict, Optional

from bson import ObjectId

from vidtube.errors import BadRequestError, NotFoundError
from vidtube.modules.aggregation import AggregationQueries
from vidtube.modules.storage import (
    COMMENTS,
    LIKES,
    PLAYLISTS,
    USERS,
    VIDEOS,
    DocumentStore,
    UserStore,
    page_window,
    require_owned,
    to_object_id,
)

logger = logging.getLogger(__name__)

# Accepted sort_by values, including the camelCase names clients send
SORT_FIELDS = {
    "created_at": "created_at",
    "createdAt": "created_at",
    "title": "title",
    "views": "views",
    "duration": "duration",
}


class VideoService:
    """Video records and their media."""

    def __init__(self, store: DocumentStore, users: UserStore, queries: AggregationQueries, blobs):
        self.store = store
        self.users = users
        self.queries = queries
        self.blobs = blobs

    async def list_videos(
        self,
        page: Any = 1,
        limit: Any = 10,
        query: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_type: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Search published videos with pagination.

        Args:
            page: 1-based page number
            limit: page size (capped)
            query: case-insensitive text matched against title and description
            sort_by: created_at, title, views or duration (default created_at)
            sort_type: "asc" or "desc" (default desc)
            user_id: restrict to one owner

        Raises:
            BadRequestError: On invalid paging, sort field or user id
        """
        page_number, page_size = page_window(page, limit)

        filter: Dict[str, Any] = {"is_published": True}
        if query and query.strip():
            pattern = {"$regex": re.escape(query.strip()), "$options": "i"}
            filter["$or"] = [{"title": pattern}, {"description": pattern}]
        if user_id:
            filter["owner"] = to_object_id(user_id, "user id")

        sort_field = SORT_FIELDS.get(sort_by or "created_at")
        if not sort_field:
            raise BadRequestError(f"Cannot sort by '{sort_by}'")
        direction = 1 if (sort_type or "desc").lower() == "asc" else -1

        videos = await self.store.find_many(
            VIDEOS,
            filter,
            sort=[(sort_field, direction), ("_id", direction)],
            skip=(page_number - 1) * page_size,
            limit=page_size,
        )
        total = await self.store.count(VIDEOS, filter)

        return {
            "videos": videos,
            "pagination": {
                "total_count": total,
                "total_pages": math.ceil(total / page_size),
                "current_page": page_number,
                "page_size": page_size,
            },
        }

    async def publish(
        self,
        owner_id: ObjectId,
        title: Optional[str],
        description: Optional[str],
        video_path: Optional[str],
        thumbnail_path: Optional[str],
    ) -> Dict[str, Any]:
        """
        Upload a video (and optional thumbnail) and create its record.

        Raises:
            BadRequestError: If title, description or the video file is missing
            InternalError: If an upload fails
        """
        if not title or not title.strip():
            raise BadRequestError("Title is required")
        if not description or not description.strip():
            raise BadRequestError("Description is required")
        if not video_path:
            raise BadRequestError("Video file is required")

        video_asset = await self.blobs.upload(video_path)
        thumbnail_asset = await self.blobs.upload(thumbnail_path) if thumbnail_path else None

        video = await self.store.insert(
            VIDEOS,
            {
                "video_file": video_asset["url"],
                "thumbnail": thumbnail_asset["url"] if thumbnail_asset else "",
                "title": title.strip(),
                "description": description.strip(),
                "duration": video_asset.get("duration") or 0,
                "views": 0,
                "is_published": True,
                "owner": owner_id,
            },
        )
        await self.users.add_reference(owner_id, "videos", video["_id"])

        logger.info(f"User {owner_id} published video {video['_id']}")
        return video

    async def get_video(self, video_id: ObjectId, viewer_id: ObjectId) -> Dict[str, Any]:
        """
        Fetch a video for playback, counting the view.

        The view counter is incremented and the video moves to the end of the
        viewer's watch history. Unpublished videos are visible to their owner
        only.

        Raises:
            NotFoundError: If the video does not exist or is not visible
        """
        video = await self.queries.video_detail(video_id, viewer_id)
        if not video.get("is_published") and video.get("owner_id") != viewer_id:
            raise NotFoundError("Video not found")

        await self.store.update_one(VIDEOS, {"_id": video_id}, {"$inc": {"views": 1}})
        await self.users.record_watch(viewer_id, video_id)

        video["views"] = video.get("views", 0) + 1
        return video

    async def update_video(
        self,
        video_id: ObjectId,
        actor_id: ObjectId,
        title: Optional[str],
        description: Optional[str],
        thumbnail_path: Optional[str],
    ) -> Dict[str, Any]:
        """
        Edit title, description and/or thumbnail.

        Raises:
            NotFoundError: If the video does not exist
            ForbiddenError: If the actor does not own the video
            BadRequestError: If nothing is being changed
        """
        await require_owned(self.store, VIDEOS, video_id, actor_id, "Video")

        changes: Dict[str, Any] = {}
        if title and title.strip():
            changes["title"] = title.strip()
        if description and description.strip():
            changes["description"] = description.strip()
        if thumbnail_path:
            changes["thumbnail"] = (await self.blobs.upload(thumbnail_path))["url"]
        if not changes:
            raise BadRequestError("Title, description or thumbnail is required")

        video = await self.store.update_by_id(VIDEOS, video_id, {"$set": changes})
        if not video:
            raise NotFoundError("Video not found")
        return video

    async def delete_video(self, video_id: ObjectId, actor_id: ObjectId) -> None:
        """
        Delete a video and everything that points at it.

        Removes its comments and their likes, its likes, and its id from
        playlists, watch histories and the owner's video list.
        """
        await require_owned(self.store, VIDEOS, video_id, actor_id, "Video")

        await self.store.delete_by_id(VIDEOS, video_id)

        comment_ids = [
            comment["_id"]
            for comment in await self.store.find_many(COMMENTS, {"video": video_id}, {"_id": 1})
        ]
        if comment_ids:
            await self.store.delete_many(LIKES, {"comment": {"$in": comment_ids}})
            await self.store.delete_many(COMMENTS, {"_id": {"$in": comment_ids}})
        await self.store.delete_many(LIKES, {"video": video_id})
        await self.store.update_many(PLAYLISTS, {"videos": video_id}, {"$pull": {"videos": video_id}})
        await self.store.update_many(
            USERS, {"watch_history": video_id}, {"$pull": {"watch_history": video_id}}
        )
        await self.users.remove_reference(actor_id, "videos", video_id)

        logger.info(f"User {actor_id} deleted video {video_id}")

    async def toggle_publish(self, video_id: ObjectId, actor_id: ObjectId) -> Dict[str, Any]:
        """Flip the published flag of an owned video."""
        await require_owned(self.store, VIDEOS, video_id, actor_id, "Video")

        video = await self.store.update_by_id(
            VIDEOS, video_id, [{"$set": {"is_published": {"$not": ["$is_published"]}}}]
        )
        if not video:
            raise NotFoundError("Video not found")
        return video

    async def channel_videos(self, owner_id: ObjectId) -> list:
        """Every video of a channel, published or not, newest first."""
        return await self.store.find_many(
            VIDEOS, {"owner": owner_id}, sort=[("created_at", -1), ("_id", -1)]
        )
