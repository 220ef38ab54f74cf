"""
FastAPI application entry point for filerouter.

Assembles the route table from the routes directory once, then serves every
request through a single catch-all FastAPI route whose endpoint is the
dispatcher. This module is also the outermost error boundary: nothing a
handler raises can crash the process.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional, Union

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from filerouter.config import settings
from filerouter.routing.dispatcher import Dispatcher
from filerouter.routing.health import HEALTH_PATH
from filerouter.routing.responses import error_response, internal_error
from filerouter.routing.table import assemble_routes
from filerouter.routing.types import HTTP_METHODS

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


async def handle_request(dispatcher: Dispatcher, request: Request) -> Response:
    """
    Dispatch one request, converting any escaped exception into a response.

    - HTTPException raised by a handler -> {"error": detail} with its status
    - anything else -> logged with traceback, 500 {"error": "Internal Server Error"}
    """
    try:
        return await dispatcher.dispatch(request)
    except StarletteHTTPException as exc:
        detail = exc.detail if exc.detail is not None else "HTTP error"
        if isinstance(detail, str):
            response = error_response(detail, exc.status_code)
        else:
            response = JSONResponse(status_code=exc.status_code, content={"error": detail})
        if exc.headers:
            response.headers.update(exc.headers)
        return response
    except Exception:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return internal_error()


def create_app(routes_dir: Optional[Union[str, Path]] = None) -> FastAPI:
    """
    Build the ASGI application.

    Args:
        routes_dir: Routes root; defaults to settings.ROUTES_DIR

    Returns:
        FastAPI app with the frozen route table on ``app.state.route_table``.
    """
    routes_root = Path(routes_dir) if routes_dir is not None else settings.routes_dir

    # Assembled before the app exists, so no request ever sees a partial table
    table = assemble_routes(routes_root)
    dispatcher = Dispatcher(table)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"🚀 http://{settings.HOST}:{settings.port}   (health → {HEALTH_PATH})")
        yield
        logger.info("Shutdown requested - stopping server")

    app = FastAPI(
        title="filerouter",
        description="File-based HTTP routing service",
        version="0.1.0",
        # FastAPI's own routing only carries the catch-all below
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.route_table = table
    app.state.dispatcher = dispatcher

    async def fetch(request: Request) -> Response:
        return await handle_request(dispatcher, request)

    app.add_api_route(
        "/{path:path}",
        fetch,
        methods=list(HTTP_METHODS),
        include_in_schema=False,
    )

    logger.info("FastAPI app initialized successfully")
    return app


def run() -> None:
    """Serve the app with uvicorn (SIGINT/SIGTERM trigger a graceful stop)."""
    uvicorn.run(
        "filerouter.main:app",
        host=settings.HOST,
        port=settings.port,
        log_level=logging.getLevelName(settings.log_level).lower(),
    )


# Create FastAPI app
app = create_app()


if __name__ == "__main__":
    run()
