"""FastAPI dependencies shared by the routers."""

from fastapi import Depends, HTTPException, Request

from vidtube.modules.auth import AuthenticatedUser

from .container import ServiceContainer


def get_services(request: Request) -> ServiceContainer:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(503, "Service not initialized")
    return services


async def get_current_user(
    request: Request, services: ServiceContainer = Depends(get_services)
) -> AuthenticatedUser:
    """
    Authenticate the request.

    The accessToken cookie wins over the Authorization header. Any failure
    ends the request with 401.
    """
    return await services.auth.verifier.verify_request(
        request.cookies, request.headers.get("Authorization")
    )
