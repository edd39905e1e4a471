"""
Request body models.

Fields accept both snake_case and camelCase names. Required-ness is checked
by the services.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RequestModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Accounts


class LoginRequest(RequestModel):
    """Login by username or email."""

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class RefreshTokenRequest(RequestModel):
    """Refresh token sent in the body when the cookie is unavailable."""

    refresh_token: Optional[str] = None


class ChangePasswordRequest(RequestModel):
    old_password: Optional[str] = None
    new_password: Optional[str] = None


class UpdateAccountRequest(RequestModel):
    full_name: Optional[str] = None
    email: Optional[str] = None


# Social


class ContentRequest(RequestModel):
    """Body of a comment or tweet."""

    content: Optional[str] = None


class PlaylistRequest(RequestModel):
    name: Optional[str] = None
    description: Optional[str] = None
