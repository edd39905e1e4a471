"""Channel subscriptions (subscriber -> channel edges)."""

import logging
from typing import Any, Dict, List

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from vidtube.errors import BadRequestError, NotFoundError
from vidtube.modules.aggregation import AggregationQueries
from vidtube.modules.storage import SUBSCRIPTIONS, DocumentStore, UserStore

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Toggle and list subscriptions."""

    def __init__(self, store: DocumentStore, users: UserStore, queries: AggregationQueries):
        self.store = store
        self.users = users
        self.queries = queries

    async def _require_user(self, user_id: ObjectId, label: str) -> None:
        if not await self.users.find_by_id(user_id):
            raise NotFoundError(f"{label} not found")

    async def toggle(self, channel_id: ObjectId, subscriber_id: ObjectId) -> Dict[str, Any]:
        """
        Subscribe to a channel, or unsubscribe if already subscribed.

        Returns:
            {"subscribed": bool} describing the state after the toggle

        Raises:
            BadRequestError: If a user tries to subscribe to themselves
            NotFoundError: If the channel does not exist
        """
        if channel_id == subscriber_id:
            raise BadRequestError("You cannot subscribe to your own channel")
        await self._require_user(channel_id, "Channel")

        edge = {"subscriber": subscriber_id, "channel": channel_id}
        if await self.store.delete_one(SUBSCRIPTIONS, edge):
            logger.debug(f"User {subscriber_id} unsubscribed from {channel_id}")
            return {"subscribed": False}

        try:
            await self.store.insert(SUBSCRIPTIONS, edge)
        except DuplicateKeyError:
            # Concurrent subscribe already created the edge
            pass
        logger.debug(f"User {subscriber_id} subscribed to {channel_id}")
        return {"subscribed": True}

    async def channel_subscribers(self, channel_id: ObjectId) -> List[Dict[str, Any]]:
        await self._require_user(channel_id, "Channel")
        return await self.queries.channel_subscribers(channel_id)

    async def subscribed_channels(self, subscriber_id: ObjectId) -> List[Dict[str, Any]]:
        await self._require_user(subscriber_id, "Subscriber")
        return await self.queries.subscribed_channels(subscriber_id)
