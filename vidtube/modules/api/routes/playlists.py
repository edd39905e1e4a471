"""Playlist routes."""

from fastapi import APIRouter, Depends

from vidtube.modules.auth import AuthenticatedUser
from vidtube.modules.storage import to_object_id

from ..container import ServiceContainer
from ..dependencies import get_current_user, get_services
from ..models import PlaylistRequest
from ..responses import respond


def create_playlists_router() -> APIRouter:
    router = APIRouter(prefix="/playlists", tags=["playlists"], dependencies=[Depends(get_current_user)])

    @router.post("")
    async def create_playlist(
        body: PlaylistRequest,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        playlist = await services.playlists.create_playlist(user.id, body.name, body.description)
        return respond(201, playlist, "Playlist created successfully")

    @router.get("/user/{user_id}")
    async def user_playlists(user_id: str, services: ServiceContainer = Depends(get_services)):
        playlists = await services.playlists.user_playlists(to_object_id(user_id, "user id"))
        return respond(200, playlists, "User playlists fetched successfully")

    @router.patch("/add/{video_id}/{playlist_id}")
    async def add_video(
        video_id: str,
        playlist_id: str,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        playlist = await services.playlists.add_video(
            to_object_id(video_id, "video id"), to_object_id(playlist_id, "playlist id"), user.id
        )
        return respond(200, playlist, "Video added to playlist successfully")

    @router.patch("/remove/{video_id}/{playlist_id}")
    async def remove_video(
        video_id: str,
        playlist_id: str,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        playlist = await services.playlists.remove_video(
            to_object_id(video_id, "video id"), to_object_id(playlist_id, "playlist id"), user.id
        )
        return respond(200, playlist, "Video removed from playlist successfully")

    @router.get("/{playlist_id}")
    async def get_playlist(
        playlist_id: str,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        playlist = await services.playlists.get_playlist(to_object_id(playlist_id, "playlist id"), user.id)
        return respond(200, playlist, "Playlist fetched successfully")

    @router.patch("/{playlist_id}")
    async def update_playlist(
        playlist_id: str,
        body: PlaylistRequest,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        playlist = await services.playlists.update_playlist(
            to_object_id(playlist_id, "playlist id"), user.id, body.name, body.description
        )
        return respond(200, playlist, "Playlist updated successfully")

    @router.delete("/{playlist_id}")
    async def delete_playlist(
        playlist_id: str,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        await services.playlists.delete_playlist(to_object_id(playlist_id, "playlist id"), user.id)
        return respond(200, {}, "Playlist deleted successfully")

    return router
