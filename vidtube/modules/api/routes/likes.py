"""Like routes: /toggle/v|c|t/{id} and the liked-videos list."""

from fastapi import APIRouter, Depends

from vidtube.modules.auth import AuthenticatedUser
from vidtube.modules.storage import to_object_id

from ..container import ServiceContainer
from ..dependencies import get_current_user, get_services
from ..responses import respond

# path segment -> like target
TOGGLE_TARGETS = {"v": "video", "c": "comment", "t": "tweet"}


def create_likes_router() -> APIRouter:
    router = APIRouter(prefix="/likes", tags=["likes"], dependencies=[Depends(get_current_user)])

    async def toggle(kind: str, target_id: str, user: AuthenticatedUser, services: ServiceContainer):
        target = TOGGLE_TARGETS[kind]
        state = await services.likes.toggle(target, to_object_id(target_id, f"{target} id"), user.id)
        message = f"{target.capitalize()} {'liked' if state['is_liked'] else 'unliked'} successfully"
        return respond(200, state, message)

    @router.post("/toggle/v/{video_id}")
    async def toggle_video_like(
        video_id: str,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        return await toggle("v", video_id, user, services)

    @router.post("/toggle/c/{comment_id}")
    async def toggle_comment_like(
        comment_id: str,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        return await toggle("c", comment_id, user, services)

    @router.post("/toggle/t/{tweet_id}")
    async def toggle_tweet_like(
        tweet_id: str,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        return await toggle("t", tweet_id, user, services)

    @router.get("/videos")
    async def liked_videos(
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        videos = await services.likes.liked_videos(user.id)
        return respond(200, videos, "Liked videos fetched successfully")

    return router
