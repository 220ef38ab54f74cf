"""
Root endpoint (GET /).

Returns a short service description with pointers to the health checks.
"""

from filerouter import __version__
from filerouter.routing import RouteBuilder
from filerouter.routing.health import HEALTH_PATH, READY_PATH

router = RouteBuilder()


@router.get
async def describe_service(request):
    return {
        "service": "filerouter",
        "version": __version__,
        "health": HEALTH_PATH,
        "ready": READY_PATH,
    }
