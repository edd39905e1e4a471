#!/usr/bin/env python3
"""
VidTube - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Initializes modules
3. Runs the API server

All business logic is in the modules, following black box principles.
"""

import logging
import logging.config as log_config
from contextlib import asynccontextmanager
from typing import Optional

import redis.asyncio as redis
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import ConnectionFailure
from starlette.exceptions import HTTPException as StarletteHTTPException

from vidtube.config.provider import ConfigProvider, EnvConfigProvider
from vidtube.errors import ApiError
from vidtube.logging_config import get_logging_config
from vidtube.modules.api import build_services, create_api_router, respond_error
from vidtube.modules.auth import AuthFactory
from vidtube.modules.storage import StorageModule

# Configuration provider (centralized config access)
config_provider: ConfigProvider = EnvConfigProvider()
api_config = config_provider.get_api_config()

# Configure logging with health check suppression
log_config.dictConfig(get_logging_config(api_config.log_level))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - initialize and cleanup resources.
    """
    logger.info("Starting VidTube API...")

    # Raises ValueError when a token secret is missing
    token_config = config_provider.get_token_config()
    mongo_config = config_provider.get_mongo_config()
    redis_config = config_provider.get_redis_config()

    storage = StorageModule(mongo_config.uri, mongo_config.database)
    store = await storage.connect()
    await storage.ensure_indexes(store)

    redis_client: Optional[redis.Redis] = None
    if redis_config.is_configured:
        redis_client = redis.from_url(redis_config.url, encoding="utf-8", decode_responses=True)
        logger.info("Redis audit trail enabled")

    # Build authentication stack via factory (dependency injection)
    auth = AuthFactory.build(token_config, store, redis_client)
    app.state.services = build_services(
        store,
        auth,
        api_config,
        config_provider.get_cloudinary_config(),
        config_provider.get_upload_config(),
    )

    logger.info("VidTube API started successfully")

    yield

    # Shutdown
    logger.info("Shutting down VidTube API...")
    if redis_client:
        await redis_client.aclose()
    await storage.disconnect()
    logger.info("VidTube API shutdown complete")


def register_exception_handlers(app: FastAPI) -> None:
    """Convert every error family into the standard error envelope."""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return respond_error(exc.status_code, exc.message, exc.errors)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(part) for part in error.get("loc", ())), "message": error.get("msg")}
            for error in exc.errors()
        ]
        return respond_error(400, "Invalid request", errors)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return respond_error(exc.status_code, str(exc.detail))

    @app.exception_handler(ConnectionFailure)
    async def database_error_handler(request: Request, exc: ConnectionFailure):
        """Handle MongoDB connection errors."""
        logger.error(f"MongoDB connection error: {exc}")
        return respond_error(503, "Database connection failed")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return respond_error(500, "Internal server error")


def create_app() -> FastAPI:
    """Create the FastAPI application with routes, CORS and error handlers."""
    app = FastAPI(
        title="VidTube API",
        description="VidTube - Video sharing platform backend",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(create_api_router())
    register_exception_handlers(app)

    @app.get("/healthz")
    async def healthz():
        """
        Minimal health check endpoint for readiness/liveness probes.

        This endpoint is unauthenticated and returns a simple OK response.
        """
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    # Use dict config for logging, not file path
    uvicorn.run(
        "vidtube.main:app",
        host=api_config.host,
        port=api_config.port,
        log_level=api_config.log_level.lower(),
        reload=api_config.debug,
        log_config=get_logging_config(api_config.log_level),
    )
