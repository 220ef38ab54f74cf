"""
JSON responses produced by the router itself (not by route handlers).
"""

from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from filerouter.schemas.errors import ErrorResponse, ValidationErrorResponse


def error_response(message: str, status_code: int) -> JSONResponse:
    """Build a ``{"error": message}`` JSON response."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump()
    )


def validation_failed(part: str, issues: list[dict[str, Any]]) -> JSONResponse:
    """Build the 400 response for a request part that failed its schema."""
    body = ValidationErrorResponse(error=f"{part} validation failed", issues=issues)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(body)
    )


def not_found() -> JSONResponse:
    return error_response("Not found", status.HTTP_404_NOT_FOUND)


def method_not_allowed() -> JSONResponse:
    return error_response("Method Not Allowed", status.HTTP_405_METHOD_NOT_ALLOWED)


def forbidden() -> Response:
    """Empty 403, returned when a middleware answers ``False``."""
    return Response(status_code=status.HTTP_403_FORBIDDEN)


def internal_error() -> JSONResponse:
    return error_response("Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR)


def to_response(result: Any) -> Response:
    """
    Normalize a handler's return value into a response.

    An already-built Response passes through untouched. Anything else
    (dicts, lists, pydantic models, dataclasses, None) is encoded with
    FastAPI's jsonable_encoder and sent as a 200 JSON response.
    """
    if isinstance(result, Response):
        return result
    return JSONResponse(status_code=status.HTTP_200_OK, content=jsonable_encoder(result))
