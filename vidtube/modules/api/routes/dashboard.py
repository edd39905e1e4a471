"""Channel dashboard routes for the authenticated user's own channel."""

from fastapi import APIRouter, Depends

from vidtube.modules.auth import AuthenticatedUser

from ..container import ServiceContainer
from ..dependencies import get_current_user, get_services
from ..responses import respond


def create_dashboard_router() -> APIRouter:
    router = APIRouter(prefix="/dashboard", tags=["dashboard"])

    @router.get("/stats")
    async def channel_stats(
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        stats = await services.dashboard.channel_stats(user.id)
        return respond(200, stats, "Channel stats fetched successfully")

    @router.get("/videos")
    async def channel_videos(
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        videos = await services.dashboard.channel_videos(user.id)
        return respond(200, videos, "Channel videos fetched successfully")

    return router
