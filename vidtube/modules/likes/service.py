"""
Likes on videos, comments and tweets.

A like document holds liked_by plus exactly one target field. Toggling
either removes the existing like or creates one.
"""

import logging
from typing import Any, Dict, List

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from vidtube.errors import BadRequestError
from vidtube.modules.aggregation import AggregationQueries
from vidtube.modules.storage import COMMENTS, LIKES, TWEETS, VIDEOS, DocumentStore, require_document

logger = logging.getLogger(__name__)

# like field -> (collection, label)
TARGETS = {
    "video": (VIDEOS, "Video"),
    "comment": (COMMENTS, "Comment"),
    "tweet": (TWEETS, "Tweet"),
}


class LikeService:
    """Toggle and list likes."""

    def __init__(self, store: DocumentStore, queries: AggregationQueries):
        self.store = store
        self.queries = queries

    async def toggle(self, target: str, target_id: ObjectId, user_id: ObjectId) -> Dict[str, Any]:
        """
        Like the target if the user has not yet, otherwise remove the like.

        Returns:
            {"is_liked": bool} describing the state after the toggle

        Raises:
            NotFoundError: If the target does not exist
        """
        if target not in TARGETS:
            raise BadRequestError(f"Cannot like a {target}")
        collection, label = TARGETS[target]
        await require_document(self.store, collection, target_id, label, {"_id": 1})

        edge = {"liked_by": user_id, target: target_id}
        if await self.store.delete_one(LIKES, edge):
            logger.debug(f"User {user_id} unliked {target} {target_id}")
            return {"is_liked": False}

        try:
            await self.store.insert(LIKES, edge)
        except DuplicateKeyError:
            # Concurrent like already created the edge
            pass
        logger.debug(f"User {user_id} liked {target} {target_id}")
        return {"is_liked": True}

    async def liked_videos(self, user_id: ObjectId) -> List[Dict[str, Any]]:
        return await self.queries.liked_videos(user_id)
