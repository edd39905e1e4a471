"""
API Module - Black Box Interface

Purpose: HTTP surface of the application
Interface: create_api_router(), ServiceContainer, build_services(), respond()
Hidden: Route layout, request models, cookie handling
"""

from .container import ServiceContainer, build_services
from .dependencies import get_current_user, get_services
from .responses import ApiErrorResponse, ApiResponse, encode, respond, respond_error
from .routes import API_PREFIX, create_api_router

__all__ = [
    "API_PREFIX",
    "ApiErrorResponse",
    "ApiResponse",
    "ServiceContainer",
    "build_services",
    "create_api_router",
    "encode",
    "get_current_user",
    "get_services",
    "respond",
    "respond_error",
]
