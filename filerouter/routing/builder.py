"""
RouteBuilder: per-endpoint accumulation of handlers, middleware and schemas.

Each route module creates one builder and exports it as ``router``:

    router = RouteBuilder({"*": log_request, "post": require_token})

    router.schema("post", body=MessageCreateRequest)

    @router.get
    async def list_messages(request):
        return {"messages": []}

    @router.post
    async def create_message(request: ValidatedRequest):
        return {"message": request.body.message}

At startup the assembler calls ``compile()``, which turns every registered
handler into one awaitable ``(request) -> Response`` that runs the method's
middleware in order, then the handler, then normalizes the result.
"""

import inspect
import logging
from typing import Any, Callable, Optional, Sequence

from fastapi import Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from filerouter.routing.errors import (
    ConfigurationError,
    DuplicateHandlerError,
    DuplicateSchemaError,
    InvalidMiddlewareResult,
)
from filerouter.routing.responses import forbidden, to_response
from filerouter.routing.types import (
    HTTP_METHODS,
    WILDCARD,
    CompiledHandler,
    Middleware,
    MiddlewareMap,
    RouteHandler,
    normalize_method,
)
from filerouter.routing.validation import (
    SchemaValidator,
    ValidatedRequest,
    ValidationSchemas,
    build_schemas,
)

logger = logging.getLogger(__name__)


def _to_tuple(value: Any) -> tuple:
    """Normalize a single value, a sequence, or None into a tuple."""
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


def _method_key(method: str) -> str:
    try:
        return normalize_method(method)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc


async def _invoke(func: Callable[..., Any], argument: Any) -> Any:
    """Call a sync or async callable and await its result if needed."""
    if inspect.iscoroutinefunction(func) or inspect.iscoroutinefunction(getattr(func, "__call__", None)):
        return await func(argument)

    result = await run_in_threadpool(func, argument)
    if inspect.isawaitable(result):
        result = await result
    return result


class RouteBuilder:
    """
    Accumulates handlers, middleware and validation schemas for one endpoint.

    Middleware map keys are HTTP method names in any case, or ``"*"`` for
    every method. Wildcard middleware runs before method-specific middleware.
    """

    def __init__(self, middleware: Optional[MiddlewareMap] = None):
        self._handlers: dict[str, RouteHandler] = {}
        self._schemas: dict[str, ValidationSchemas] = {}
        self._middleware: dict[str, tuple[Middleware, ...]] = {
            method: () for method in HTTP_METHODS
        }

        if middleware is None:
            return

        wildcard = _to_tuple(middleware.get(WILDCARD))
        specific: dict[str, tuple[Middleware, ...]] = {}
        for key, value in middleware.items():
            if key == WILDCARD:
                continue
            method = _method_key(key)
            if method in specific:
                raise ConfigurationError(f"Middleware for {method} already defined.")
            specific[method] = _to_tuple(value)

        for step in wildcard + tuple(step for steps in specific.values() for step in steps):
            if not callable(step):
                raise ConfigurationError(f"Middleware {step!r} is not callable")

        for method in HTTP_METHODS:
            self._middleware[method] = wildcard + specific.get(method, ())

    # --- registration ---

    def schema(
        self,
        method: str,
        schemas: Optional[ValidationSchemas] = None,
        *,
        body: Any = None,
        query: Any = None,
        headers: Any = None,
        params: Any = None,
    ) -> "RouteBuilder":
        """
        Define the validation schemas for one method.

        Appends a validation step after the method's existing middleware.

        Raises:
            DuplicateSchemaError: If the method already has a schema set.
            ConfigurationError: If a schema is not something pydantic can validate.
        """
        key = _method_key(method)
        if key in self._schemas:
            raise DuplicateSchemaError(key)

        schema_set = build_schemas(schemas, body=body, query=query, headers=headers, params=params)
        # Build the validator first so a bad schema leaves no partial state
        validator = SchemaValidator(key, schema_set)

        self._schemas[key] = schema_set
        self._middleware[key] = self._middleware[key] + (validator,)
        return self

    def on(self, method: str, handler: RouteHandler) -> "RouteBuilder":
        """
        Register the business handler for one method.

        Raises:
            DuplicateHandlerError: If the method already has a handler.
            ConfigurationError: If the handler is not callable.
        """
        key = _method_key(method)
        if key in self._handlers:
            raise DuplicateHandlerError(key)
        if not callable(handler):
            raise ConfigurationError(f"Handler for {key} must be callable, got {type(handler).__name__}")

        self._handlers[key] = handler
        return self

    def _decorator(self, method: str) -> Callable[[RouteHandler], RouteHandler]:
        def register(handler: RouteHandler) -> RouteHandler:
            self.on(method, handler)
            return handler
        return register

    def get(self, handler: RouteHandler) -> RouteHandler:
        return self._decorator("GET")(handler)

    def post(self, handler: RouteHandler) -> RouteHandler:
        return self._decorator("POST")(handler)

    def put(self, handler: RouteHandler) -> RouteHandler:
        return self._decorator("PUT")(handler)

    def delete(self, handler: RouteHandler) -> RouteHandler:
        return self._decorator("DELETE")(handler)

    def patch(self, handler: RouteHandler) -> RouteHandler:
        return self._decorator("PATCH")(handler)

    def head(self, handler: RouteHandler) -> RouteHandler:
        return self._decorator("HEAD")(handler)

    def options(self, handler: RouteHandler) -> RouteHandler:
        return self._decorator("OPTIONS")(handler)

    # --- introspection ---

    @property
    def methods(self) -> tuple[str, ...]:
        """Methods with a registered handler, in registration order."""
        return tuple(self._handlers)

    def middleware_for(self, method: str) -> tuple[Middleware, ...]:
        return self._middleware[_method_key(method)]

    def schemas_for(self, method: str) -> Optional[ValidationSchemas]:
        return self._schemas.get(_method_key(method))

    # --- compilation ---

    def compile(self) -> dict[str, CompiledHandler]:
        """
        Build the dispatchable method table.

        Returns:
            Mapping of uppercase method name to a composed handler. Empty when
            no handler was registered.
        """
        table: dict[str, CompiledHandler] = {}
        for method, handler in self._handlers.items():
            table[method] = _compose(method, self._middleware[method], handler)
            logger.debug(f"Compiled {method} handler with {len(self._middleware[method])} middleware steps")
        return table

    def __repr__(self) -> str:
        return f"RouteBuilder(methods={list(self._handlers)})"


def _compose(
    method: str,
    chain: Sequence[Middleware],
    handler: RouteHandler,
) -> CompiledHandler:
    """Close over a snapshot of the chain so later registrations can't leak in."""
    steps = tuple(chain)

    async def compiled(request: Request) -> Response:
        current: Any = request

        for step in steps:
            result = await _invoke(step, current)

            if isinstance(result, ValidatedRequest):
                current = result
            elif isinstance(result, Response):
                return result
            elif result is False:
                return forbidden()
            elif result is None or result is True:
                continue
            else:
                raise InvalidMiddlewareResult(
                    f"Middleware {step!r} for {method} returned {type(result).__name__}; "
                    "expected None, True, False or a Response"
                )

        return to_response(await _invoke(handler, current))

    compiled.__name__ = f"{method.lower()}_{getattr(handler, '__name__', 'handler')}"
    compiled.method = method  # type: ignore[attr-defined]
    compiled.middleware = steps  # type: ignore[attr-defined]
    return compiled
