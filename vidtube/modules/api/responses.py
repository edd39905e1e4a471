"""
Response envelope.

Every endpoint answers with the same JSON shape:

    {"statusCode": int, "data": ..., "message": str, "success": bool}

success is derived from the status (< 400). Error responses carry an extra
"errors" list.
"""

from typing import Any, List, Optional

from bson import ObjectId
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_ENCODERS = {ObjectId: str}


def encode(data: Any) -> Any:
    """Convert stored documents (ObjectId, datetime) into JSON-safe values."""
    return jsonable_encoder(data, custom_encoder=_ENCODERS)


class ApiResponse(BaseModel):
    """Success envelope."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status_code: int
    data: Any = None
    message: str = "Success"
    success: bool = True

    @classmethod
    def build(cls, status_code: int, data: Any, message: str = "Success") -> "ApiResponse":
        return cls(
            status_code=status_code,
            data=encode(data),
            message=message,
            success=status_code < 400,
        )


class ApiErrorResponse(ApiResponse):
    """Error envelope."""

    success: bool = False
    errors: List[Any] = Field(default_factory=list)

    @classmethod
    def from_error(
        cls, status_code: int, message: str, errors: Optional[List[Any]] = None
    ) -> "ApiErrorResponse":
        return cls(
            status_code=status_code,
            data=None,
            message=message,
            success=status_code < 400,
            errors=encode(errors or []),
        )


def respond(status_code: int, data: Any, message: str = "Success") -> JSONResponse:
    """Build the JSON response for a successful request."""
    body = ApiResponse.build(status_code, data, message)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


def respond_error(status_code: int, message: str, errors: Optional[List[Any]] = None) -> JSONResponse:
    body = ApiErrorResponse.from_error(status_code, message, errors)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))
