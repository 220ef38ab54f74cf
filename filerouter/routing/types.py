"""
Shared type aliases for the routing layer.

Handlers and middleware may be plain functions or coroutine functions.
Middleware results:
- ``None`` or ``True``  -> continue with the next step
- ``False``             -> stop with 403
- ``Response``          -> stop and reply with that response
"""

from typing import Any, Awaitable, Callable, Literal, Mapping, Sequence, Union

from fastapi import Request
from fastapi.responses import Response

# HTTP verbs a route module may register handlers for
RouteMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]

HTTP_METHODS: tuple[str, ...] = (
    "GET",
    "POST",
    "PUT",
    "DELETE",
    "PATCH",
    "HEAD",
    "OPTIONS",
)

# Middleware map key that targets every method
WILDCARD = "*"

# Route table key of the catch-all entry
CATCH_ALL = "*"

MiddlewareResult = Union[None, bool, Response]

Middleware = Callable[[Any], Union[MiddlewareResult, Awaitable[MiddlewareResult]]]

MiddlewareMap = Mapping[str, Union[Middleware, Sequence[Middleware]]]

# Business handler: receives a Request, or a ValidatedRequest when a schema is set
RouteHandler = Callable[[Any], Any]

# Fully composed handler produced by RouteBuilder.compile()
CompiledHandler = Callable[[Request], Awaitable[Response]]

MethodTable = Mapping[str, CompiledHandler]

# A route table entry is either one callable for every method or a method table
RouteEntry = Union[CompiledHandler, MethodTable]


def normalize_method(method: str) -> str:
    """
    Return the canonical uppercase form of an HTTP method name.

    Raises:
        ValueError: If the method is not one of HTTP_METHODS.
    """
    upper = str(method).upper()
    if upper not in HTTP_METHODS:
        raise ValueError(
            f"Unsupported HTTP method {method!r}. "
            f"Expected one of: {', '.join(HTTP_METHODS)}"
        )
    return upper
