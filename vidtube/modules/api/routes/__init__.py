"""
HTTP routers, one factory per resource.

All of them are mounted under /api/v1 by vidtube.main.
"""

from fastapi import APIRouter

from .comments import create_comments_router
from .dashboard import create_dashboard_router
from .healthcheck import create_healthcheck_router
from .likes import create_likes_router
from .playlists import create_playlists_router
from .subscriptions import create_subscriptions_router
from .tweets import create_tweets_router
from .users import create_users_router
from .videos import create_videos_router

API_PREFIX = "/api/v1"


def create_api_router() -> APIRouter:
    """Assemble every resource router under /api/v1."""
    router = APIRouter(prefix=API_PREFIX)
    router.include_router(create_healthcheck_router())
    router.include_router(create_users_router())
    router.include_router(create_videos_router())
    router.include_router(create_comments_router())
    router.include_router(create_likes_router())
    router.include_router(create_tweets_router())
    router.include_router(create_playlists_router())
    router.include_router(create_subscriptions_router())
    router.include_router(create_dashboard_router())
    return router


__all__ = ["API_PREFIX", "create_api_router"]
