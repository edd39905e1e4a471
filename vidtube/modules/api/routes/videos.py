"""Video routes."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from vidtube.modules.auth import AuthenticatedUser
from vidtube.modules.storage import to_object_id

from ..container import ServiceContainer
from ..dependencies import get_current_user, get_services
from ..responses import respond


def create_videos_router() -> APIRouter:
    """Create the /videos router; every route requires authentication."""
    router = APIRouter(prefix="/videos", tags=["videos"], dependencies=[Depends(get_current_user)])

    @router.get("")
    async def list_videos(
        page: Optional[str] = Query(None),
        limit: Optional[str] = Query(None),
        query: Optional[str] = Query(None),
        sort_by: Optional[str] = Query(None),
        sort_type: Optional[str] = Query(None),
        user_id: Optional[str] = Query(None),
        services: ServiceContainer = Depends(get_services),
    ):
        result = await services.videos.list_videos(page, limit, query, sort_by, sort_type, user_id)
        return respond(200, result, "Videos fetched successfully")

    @router.post("")
    async def publish_video(
        title: Optional[str] = Form(None),
        description: Optional[str] = Form(None),
        video_file: Optional[UploadFile] = File(None),
        thumbnail: Optional[UploadFile] = File(None),
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        async with services.stager.staged(video_file, thumbnail) as (video_path, thumbnail_path):
            video = await services.videos.publish(
                user.id, title, description, video_path, thumbnail_path
            )
        return respond(201, video, "Video published successfully")

    @router.get("/{video_id}")
    async def get_video(
        video_id: str,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        video = await services.videos.get_video(to_object_id(video_id, "video id"), user.id)
        return respond(200, video, "Video fetched successfully")

    @router.patch("/{video_id}")
    async def update_video(
        video_id: str,
        title: Optional[str] = Form(None),
        description: Optional[str] = Form(None),
        thumbnail: Optional[UploadFile] = File(None),
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        oid = to_object_id(video_id, "video id")
        async with services.stager.staged(thumbnail) as (thumbnail_path,):
            video = await services.videos.update_video(oid, user.id, title, description, thumbnail_path)
        return respond(200, video, "Video updated successfully")

    @router.delete("/{video_id}")
    async def delete_video(
        video_id: str,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        await services.videos.delete_video(to_object_id(video_id, "video id"), user.id)
        return respond(200, {}, "Video deleted successfully")

    @router.patch("/toggle/publish/{video_id}")
    async def toggle_publish(
        video_id: str,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        video = await services.videos.toggle_publish(to_object_id(video_id, "video id"), user.id)
        return respond(200, video, "Publish status toggled successfully")

    return router
