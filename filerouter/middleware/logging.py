"""
Request logging middleware.

Logs one line per request with the client address, method, path and query
string. Never logs headers or bodies. Always lets the request continue.

Usage:
    router = RouteBuilder({"*": log_request})
"""

from fastapi import Request

from filerouter.utils.logging import get_logger

logger = get_logger(__name__)


def format_request_line(request: Request) -> str:
    """e.g. ``➥  127.0.0.1 GET /echo?text=hi``"""
    client = request.client.host if request.client else "-"
    query = request.url.query
    target = f"{request.url.path}?{query}" if query else request.url.path
    return f"➥  {client} {request.method} {target}"


async def log_request(request: Request) -> bool:
    logger.info(format_request_line(request))
    return True
