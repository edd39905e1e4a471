"""Identifier parsing for path and body parameters."""

import re
from typing import Any

from bson import ObjectId

from vidtube.errors import BadRequestError

_HEX_ID = re.compile(r"^[0-9a-fA-F]{24}$")


def to_object_id(value: Any, label: str = "id") -> ObjectId:
    """
    Convert a client-supplied identifier to an ObjectId.

    Raises:
        BadRequestError: If the value is not a 24-character hex string
    """
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not _HEX_ID.match(value):
        raise BadRequestError(f"Invalid {label}")
    return ObjectId(value)
