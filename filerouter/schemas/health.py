"""
Health check endpoint schemas.

Both health endpoints are PUBLIC and answer for every HTTP method.
"""

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """
    Response model for GET /health.

    Used by load balancers, monitoring systems, and deployment checks.
    """

    status: str = Field(
        default="ok",
        description="Liveness status (always 'ok' if responding)",
        examples=["ok"]
    )
    ts: int = Field(..., description="Current time in epoch milliseconds")
    up: float = Field(..., description="Seconds since the process started", ge=0)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "ok",
                "ts": 1760659200000,
                "up": 12.5
            }
        }
    )


class ReadinessResponse(BaseModel):
    """Response model for GET /health/ready."""

    status: str = Field(
        default="ready",
        description="Readiness status (always 'ready' once routes are assembled)",
        examples=["ready"]
    )
    ts: int = Field(..., description="Current time in epoch milliseconds")
