"""
Error body schemas returned by the routing layer.

Every error the router produces is a JSON object with an ``error`` key.
Validation failures additionally carry pydantic's ``issues`` list.
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Generic error body (404, 405, 500, malformed JSON)."""

    error: str = Field(..., description="Human-readable error message", examples=["Not found"])


class ValidationErrorResponse(ErrorResponse):
    """
    Error body for a failed request part.

    ``error`` names the part, e.g. "Body validation failed".
    """

    issues: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Validation issues as reported by pydantic (type, loc, msg, input)"
    )
