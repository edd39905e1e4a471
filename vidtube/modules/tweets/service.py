"""Short text posts on a user's channel."""

import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId

from vidtube.errors import BadRequestError, NotFoundError
from vidtube.modules.aggregation import AggregationQueries
from vidtube.modules.storage import LIKES, TWEETS, DocumentStore, UserStore, require_owned

logger = logging.getLogger(__name__)


def _content(value: Optional[str]) -> str:
    if not value or not value.strip():
        raise BadRequestError("Content is required")
    return value.strip()


class TweetService:
    """Create, list, edit and delete tweets."""

    def __init__(self, store: DocumentStore, users: UserStore, queries: AggregationQueries):
        self.store = store
        self.users = users
        self.queries = queries

    async def create_tweet(self, owner_id: ObjectId, content: Optional[str]) -> Dict[str, Any]:
        tweet = await self.store.insert(TWEETS, {"content": _content(content), "owner": owner_id})
        await self.users.add_reference(owner_id, "tweets", tweet["_id"])
        return tweet

    async def user_tweets(self, user_id: ObjectId) -> List[Dict[str, Any]]:
        """
        A user's tweets, newest first.

        Raises:
            NotFoundError: If the user does not exist
        """
        if not await self.users.find_by_id(user_id):
            raise NotFoundError("User not found")
        return await self.queries.user_tweets(user_id)

    async def update_tweet(self, tweet_id: ObjectId, actor_id: ObjectId, content: Optional[str]) -> Dict[str, Any]:
        text = _content(content)
        await require_owned(self.store, TWEETS, tweet_id, actor_id, "Tweet")

        tweet = await self.store.update_by_id(TWEETS, tweet_id, {"$set": {"content": text}})
        if not tweet:
            raise NotFoundError("Tweet not found")
        return tweet

    async def delete_tweet(self, tweet_id: ObjectId, actor_id: ObjectId) -> None:
        await require_owned(self.store, TWEETS, tweet_id, actor_id, "Tweet")
        await self.store.delete_by_id(TWEETS, tweet_id)
        await self.store.delete_many(LIKES, {"tweet": tweet_id})
        await self.users.remove_reference(actor_id, "tweets", tweet_id)
        logger.debug(f"User {actor_id} deleted tweet {tweet_id}")
