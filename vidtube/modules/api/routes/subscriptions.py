"""Subscription routes."""

from fastapi import APIRouter, Depends

from vidtube.modules.auth import AuthenticatedUser
from vidtube.modules.storage import to_object_id

from ..container import ServiceContainer
from ..dependencies import get_current_user, get_services
from ..responses import respond


def create_subscriptions_router() -> APIRouter:
    router = APIRouter(
        prefix="/subscriptions", tags=["subscriptions"], dependencies=[Depends(get_current_user)]
    )

    @router.post("/c/{channel_id}")
    async def toggle_subscription(
        channel_id: str,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        state = await services.subscriptions.toggle(to_object_id(channel_id, "channel id"), user.id)
        message = "Subscribed successfully" if state["subscribed"] else "Unsubscribed successfully"
        return respond(200, state, message)

    @router.get("/c/{channel_id}")
    async def channel_subscribers(channel_id: str, services: ServiceContainer = Depends(get_services)):
        subscribers = await services.subscriptions.channel_subscribers(
            to_object_id(channel_id, "channel id")
        )
        return respond(200, subscribers, "Subscribers fetched successfully")

    @router.get("/u/{subscriber_id}")
    async def subscribed_channels(subscriber_id: str, services: ServiceContainer = Depends(get_services)):
        channels = await services.subscriptions.subscribed_channels(
            to_object_id(subscriber_id, "subscriber id")
        )
        return respond(200, channels, "Subscribed channels fetched successfully")

    return router
