"""Comments on videos."""

import logging
from typing import Any, Dict, Optional

from bson import ObjectId

from vidtube.errors import BadRequestError, NotFoundError
from vidtube.modules.aggregation import AggregationQueries
from vidtube.modules.storage import (
    COMMENTS,
    LIKES,
    VIDEOS,
    DocumentStore,
    page_window,
    require_document,
    require_owned,
)

logger = logging.getLogger(__name__)


def _content(value: Optional[str]) -> str:
    if not value or not value.strip():
        raise BadRequestError("Content is required")
    return value.strip()


class CommentService:
    """Create, list, edit and delete video comments."""

    def __init__(self, store: DocumentStore, queries: AggregationQueries):
        self.store = store
        self.queries = queries

    async def list_comments(self, video_id: ObjectId, page: Any = 1, limit: Any = 10) -> Dict[str, Any]:
        """
        One page of a video's comments, newest first.

        Raises:
            NotFoundError: If the video does not exist
            BadRequestError: On invalid paging
        """
        page_number, page_size = page_window(page, limit)
        await require_document(self.store, VIDEOS, video_id, "Video", {"_id": 1})

        comments = await self.queries.video_comments(video_id, page_number, page_size)
        total = await self.store.count(COMMENTS, {"video": video_id})
        return {
            "comments": comments,
            "pagination": {
                "total_count": total,
                "current_page": page_number,
                "page_size": page_size,
            },
        }

    async def add_comment(self, video_id: ObjectId, owner_id: ObjectId, content: Optional[str]) -> Dict[str, Any]:
        text = _content(content)
        await require_document(self.store, VIDEOS, video_id, "Video", {"_id": 1})

        comment = await self.store.insert(
            COMMENTS, {"content": text, "video": video_id, "owner": owner_id}
        )
        logger.debug(f"Comment {comment['_id']} added to video {video_id}")
        return comment

    async def update_comment(
        self, comment_id: ObjectId, actor_id: ObjectId, content: Optional[str]
    ) -> Dict[str, Any]:
        text = _content(content)
        await require_owned(self.store, COMMENTS, comment_id, actor_id, "Comment")

        comment = await self.store.update_by_id(COMMENTS, comment_id, {"$set": {"content": text}})
        if not comment:
            raise NotFoundError("Comment not found")
        return comment

    async def delete_comment(self, comment_id: ObjectId, actor_id: ObjectId) -> None:
        await require_owned(self.store, COMMENTS, comment_id, actor_id, "Comment")
        await self.store.delete_by_id(COMMENTS, comment_id)
        await self.store.delete_many(LIKES, {"comment": comment_id})
