"""
Request schemas used by the bundled example routes.
"""

from typing import Optional

from pydantic import BaseModel, Field


class MessageCreateRequest(BaseModel):
    """Body for POST /echo and POST /posts/:slug/comments."""

    message: str = Field(..., min_length=1, max_length=2000, description="Non-empty message text")
    author: Optional[str] = Field(None, max_length=100, description="Optional display name")


class EchoQuery(BaseModel):
    """Query string for GET /echo."""

    text: str = Field(..., min_length=1, description="Text to echo back")
    repeat: int = Field(1, ge=1, le=10, description="How many times to repeat the text")


class UserParams(BaseModel):
    """Path parameters for /users/:id."""

    id: int = Field(..., ge=1, description="Numeric user identifier")


class SlugParams(BaseModel):
    """Path parameters for /posts/:slug/comments."""

    slug: str = Field(..., pattern=r"^[a-z0-9-]+$", description="Lower-case post slug")
