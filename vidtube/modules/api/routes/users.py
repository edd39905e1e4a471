"""
User account routes.

Login and refresh set the accessToken/refreshToken cookies (HttpOnly,
Secure) and also return both tokens in the body for non-browser clients.
Logout clears them.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

from vidtube.modules.auth import ACCESS_COOKIE, REFRESH_COOKIE, AuthenticatedUser, SessionTokens

from ..container import ServiceContainer
from ..dependencies import get_current_user, get_services
from ..models import (
    ChangePasswordRequest,
    LoginRequest,
    RefreshTokenRequest,
    UpdateAccountRequest,
)
from ..responses import respond

logger = logging.getLogger(__name__)


def set_session_cookies(response: JSONResponse, tokens: SessionTokens, secure: bool) -> None:
    for name, value in ((ACCESS_COOKIE, tokens.access_token), (REFRESH_COOKIE, tokens.refresh_token)):
        response.set_cookie(name, value, httponly=True, secure=secure, samesite="lax")


def clear_session_cookies(response: JSONResponse, secure: bool) -> None:
    for name in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(name, httponly=True, secure=secure, samesite="lax")


def create_users_router() -> APIRouter:
    """Create the /users router."""
    router = APIRouter(prefix="/users", tags=["users"])

    @router.post("/register")
    async def register(
        username: Optional[str] = Form(None),
        email: Optional[str] = Form(None),
        full_name: Optional[str] = Form(None),
        password: Optional[str] = Form(None),
        avatar: Optional[UploadFile] = File(None),
        cover_image: Optional[UploadFile] = File(None),
        services: ServiceContainer = Depends(get_services),
    ):
        """Register a user (multipart form with avatar and optional cover image)."""
        async with services.stager.staged(avatar, cover_image) as (avatar_path, cover_path):
            user = await services.accounts.register(
                username, email, full_name, password, avatar_path, cover_path
            )
        return respond(201, user, "User registered successfully")

    @router.post("/login")
    async def login(body: LoginRequest, services: ServiceContainer = Depends(get_services)):
        user, tokens = await services.accounts.login(body.username, body.email, body.password)
        response = respond(
            200,
            {
                "user": user,
                "access_token": tokens.access_token,
                "refresh_token": tokens.refresh_token,
            },
            "User logged in successfully",
        )
        set_session_cookies(response, tokens, services.cookie_secure)
        return response

    @router.post("/logout")
    async def logout(
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        await services.accounts.logout(user.id)
        response = respond(200, {}, "User logged out")
        clear_session_cookies(response, services.cookie_secure)
        return response

    @router.post("/refresh-token")
    async def refresh_token(
        request: Request,
        body: Optional[RefreshTokenRequest] = None,
        services: ServiceContainer = Depends(get_services),
    ):
        """Rotate the session; the refreshToken cookie wins over the body."""
        presented = request.cookies.get(REFRESH_COOKIE) or (body.refresh_token if body else None)
        tokens = await services.accounts.refresh(presented)
        response = respond(
            200,
            {"access_token": tokens.access_token, "refresh_token": tokens.refresh_token},
            "Access token refreshed",
        )
        set_session_cookies(response, tokens, services.cookie_secure)
        return response

    @router.post("/change-password")
    async def change_password(
        body: ChangePasswordRequest,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        await services.accounts.change_password(user.id, body.old_password, body.new_password)
        return respond(200, {}, "Password changed successfully")

    @router.get("/current-user")
    async def current_user(user: AuthenticatedUser = Depends(get_current_user)):
        return respond(200, user.profile, "Current user fetched successfully")

    @router.patch("/update-account")
    async def update_account(
        body: UpdateAccountRequest,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        updated = await services.accounts.update_details(user.id, body.full_name, body.email)
        return respond(200, updated, "Account details updated successfully")

    @router.patch("/avatar")
    async def update_avatar(
        avatar: Optional[UploadFile] = File(None),
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        async with services.stager.staged(avatar) as (avatar_path,):
            updated = await services.accounts.update_avatar(user.id, avatar_path)
        return respond(200, updated, "Avatar updated successfully")

    @router.patch("/cover-image")
    async def update_cover_image(
        cover_image: Optional[UploadFile] = File(None),
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        async with services.stager.staged(cover_image) as (cover_path,):
            updated = await services.accounts.update_cover_image(user.id, cover_path)
        return respond(200, updated, "Cover image updated successfully")

    @router.get("/c/{username}")
    async def channel_profile(
        username: str,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        channel = await services.accounts.channel_profile(username, user.id)
        return respond(200, channel, "User channel fetched successfully")

    @router.get("/history")
    async def watch_history(
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        history = await services.accounts.watch_history(user.id)
        return respond(200, history, "Watch history fetched successfully")

    return router
