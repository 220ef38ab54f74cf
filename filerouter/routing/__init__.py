"""
File-based routing core.

Public API::

    from filerouter.routing import RouteBuilder, assemble_routes, Dispatcher

    table = assemble_routes(Path("routes"))
    dispatcher = Dispatcher(table)
    response = await dispatcher.dispatch(request)
"""

from filerouter.routing.builder import RouteBuilder
from filerouter.routing.dispatcher import Dispatcher, RouteMatch
from filerouter.routing.endpoints import derive_endpoint
from filerouter.routing.errors import (
    ConfigurationError,
    DuplicateHandlerError,
    DuplicateSchemaError,
    EndpointCollisionError,
    InvalidMiddlewareResult,
    RouteLoadError,
    RouterError,
)
from filerouter.routing.table import RouteTable, assemble_routes
from filerouter.routing.types import HTTP_METHODS, RouteMethod
from filerouter.routing.validation import ValidatedRequest, ValidationSchemas

__all__ = [
    "ConfigurationError",
    "Dispatcher",
    "DuplicateHandlerError",
    "DuplicateSchemaError",
    "EndpointCollisionError",
    "HTTP_METHODS",
    "InvalidMiddlewareResult",
    "RouteBuilder",
    "RouteLoadError",
    "RouteMatch",
    "RouteMethod",
    "RouteTable",
    "RouterError",
    "ValidatedRequest",
    "ValidationSchemas",
    "assemble_routes",
    "derive_endpoint",
]
