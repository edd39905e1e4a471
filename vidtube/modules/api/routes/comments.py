"""Comment routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from vidtube.modules.auth import AuthenticatedUser
from vidtube.modules.storage import to_object_id

from ..container import ServiceContainer
from ..dependencies import get_current_user, get_services
from ..models import ContentRequest
from ..responses import respond


def create_comments_router() -> APIRouter:
    router = APIRouter(prefix="/comments", tags=["comments"], dependencies=[Depends(get_current_user)])

    @router.get("/{video_id}")
    async def list_comments(
        video_id: str,
        page: Optional[str] = Query(None),
        limit: Optional[str] = Query(None),
        services: ServiceContainer = Depends(get_services),
    ):
        result = await services.comments.list_comments(to_object_id(video_id, "video id"), page, limit)
        return respond(200, result, "Comments fetched successfully")

    @router.post("/{video_id}")
    async def add_comment(
        video_id: str,
        body: ContentRequest,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        comment = await services.comments.add_comment(
            to_object_id(video_id, "video id"), user.id, body.content
        )
        return respond(201, comment, "Comment added successfully")

    @router.patch("/c/{comment_id}")
    async def update_comment(
        comment_id: str,
        body: ContentRequest,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        comment = await services.comments.update_comment(
            to_object_id(comment_id, "comment id"), user.id, body.content
        )
        return respond(200, comment, "Comment updated successfully")

    @router.delete("/c/{comment_id}")
    async def delete_comment(
        comment_id: str,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        await services.comments.delete_comment(to_object_id(comment_id, "comment id"), user.id)
        return respond(200, {}, "Comment deleted successfully")

    return router
