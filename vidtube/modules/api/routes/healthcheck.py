"""Health check route."""

import logging

from fastapi import APIRouter, Request

from ..responses import respond

logger = logging.getLogger(__name__)


def create_healthcheck_router() -> APIRouter:
    router = APIRouter(prefix="/healthcheck", tags=["healthcheck"])

    @router.get("")
    async def healthcheck(request: Request):
        """Report liveness plus database reachability."""
        database = "not initialized"
        services = getattr(request.app.state, "services", None)
        if services is not None:
            try:
                await services.store.ping()
                database = "connected"
            except Exception as e:
                logger.warning(f"Database ping failed: {e}")
                database = "unavailable"

        return respond(200, {"status": "OK", "database": database}, "Health check passed")

    return router
