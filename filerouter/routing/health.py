"""
Fixed operational endpoints seeded into every route table.

These endpoints are PUBLIC (no middleware, no authentication) and answer for
every HTTP method, for load balancers, monitoring, and deployment checks:
- /health        -> liveness, with process uptime
- /health/ready  -> readiness, installed once the route table is assembled
"""

import time

from fastapi import Request
from fastapi.responses import JSONResponse

import filerouter
from filerouter.schemas.health import HealthResponse, ReadinessResponse
from filerouter.utils.logging import get_logger

logger = get_logger(__name__)

HEALTH_PATH = "/health"
READY_PATH = "/health/ready"


def _epoch_ms() -> int:
    return int(time.time() * 1000)


def uptime() -> float:
    """Seconds since the filerouter package was first imported (never decreases)."""
    return time.monotonic() - filerouter.STARTED_AT


async def health_check(request: Request) -> JSONResponse:
    """
    Liveness probe.

    Example response:
        {
            "status": "ok",
            "ts": 1760659200000,
            "up": 12.5
        }
    """
    logger.debug("Health check endpoint called")

    return JSONResponse(HealthResponse(status="ok", ts=_epoch_ms(), up=uptime()).model_dump())


async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe: {"status": "ready", "ts": <epoch-ms>}."""
    logger.debug("Readiness check endpoint called")

    return JSONResponse(ReadinessResponse(status="ready", ts=_epoch_ms()).model_dump())


SYSTEM_ENDPOINTS = {
    HEALTH_PATH: health_check,
    READY_PATH: readiness_check,
}
