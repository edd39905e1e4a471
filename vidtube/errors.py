"""
Typed errors shared by every module.

Each error carries the HTTP status it maps to. Modules raise them; the API
layer converts any of them into the standard error envelope.
"""

from typing import Any, List, Optional


class ApiError(Exception):
    """Base error carrying a numeric status and a human-readable message."""

    status_code: int = 500
    default_message: str = "Something went wrong"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Any]] = None):
        self.message = message or self.default_message
        self.errors = list(errors or [])
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.status_code}, {self.message!r})"


class BadRequestError(ApiError):
    """Malformed or missing input, invalid identifier format."""
    status_code = 400
    default_message = "Bad request"


class UnauthorizedError(ApiError):
    """Missing, invalid, expired or reused credential."""
    status_code = 401
    default_message = "Unauthorized request"


class ForbiddenError(ApiError):
    """Actor is not the owner of the resource."""
    status_code = 403
    default_message = "You are not allowed to modify this resource"


class NotFoundError(ApiError):
    """Referenced entity does not exist."""
    status_code = 404
    default_message = "Resource not found"


class ConflictError(ApiError):
    """Uniqueness violation."""
    status_code = 409
    default_message = "Resource already exists"


class InternalError(ApiError):
    """Unexpected dependency failure, e.g. an upload that did not complete."""
    status_code = 500


__all__ = [
    "ApiError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "InternalError",
]
