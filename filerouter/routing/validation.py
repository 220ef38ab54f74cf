"""
Request validation for route builders.

A ``ValidationSchemas`` set holds up to four independent schemas (body,
query, headers, path parameters). ``RouteBuilder.schema()`` wraps the set in
a ``SchemaValidator`` and appends it to the method's middleware sequence, so
it always runs after the user-supplied middleware.

The validator never mutates the inbound request. On success it produces a
``ValidatedRequest`` carrying the typed values, which the compiled handler
passes to the business handler instead of the raw request.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

from fastapi import Request, status
from fastapi.responses import Response
from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

from filerouter.routing.errors import ConfigurationError
from filerouter.routing.responses import error_response, validation_failed

logger = logging.getLogger(__name__)

INVALID_JSON_MESSAGE = "Invalid JSON in request body"


@dataclass(frozen=True)
class ValidationSchemas:
    """
    Per-method schema set.

    Each attribute is anything pydantic can validate against: a BaseModel
    subclass, a TypedDict, or a plain annotation such as ``dict[str, int]``.
    Parts left as None are not checked.
    """
    body: Any = None
    query: Any = None
    headers: Any = None
    params: Any = None


@dataclass(frozen=True)
class ValidatedRequest:
    """
    A request whose schema-checked parts have been parsed into typed values.

    Attributes:
        request: The raw inbound request, untouched
        body: Validated JSON body, or None when no body schema is set
        query: Validated query parameters, or None
        headers: Validated headers (lower-cased names), or None
        params: Validated path parameters, or None
    """
    request: Request
    body: Any = None
    query: Any = None
    headers: Any = None
    params: Any = None

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def url(self):
        return self.request.url

    @property
    def client(self):
        return self.request.client


class InvalidJSONBody(Exception):
    """The request body could not be decoded as JSON."""


async def _read_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as exc:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        raise InvalidJSONBody(INVALID_JSON_MESSAGE) from exc


async def _read_query(request: Request) -> dict[str, str]:
    return dict(request.query_params)


async def _read_headers(request: Request) -> dict[str, str]:
    return dict(request.headers)


async def _read_params(request: Request) -> dict[str, Any]:
    return dict(request.path_params)


@dataclass(frozen=True)
class _Part:
    key: str
    name: str
    read: Callable[[Request], Awaitable[Any]]


# Evaluation order; the first failing part short-circuits the rest
_PARTS: tuple[_Part, ...] = (
    _Part("body", "Body", _read_body),
    _Part("query", "Query", _read_query),
    _Part("headers", "Headers", _read_headers),
    _Part("params", "URL Parameters", _read_params),
)


def _issues(exc: ValidationError) -> list[dict[str, Any]]:
    # Round-trip through JSON so custom validator contexts stay serializable
    return json.loads(exc.json(include_url=False))


class SchemaValidator:
    """
    Validation step generated by ``RouteBuilder.schema()``.

    Returns a 400 response on the first failing part, a 400 for a malformed
    JSON body, a 500 for any unexpected error, or a ``ValidatedRequest`` when
    every configured part passes.
    """

    def __init__(self, method: str, schemas: ValidationSchemas):
        self.method = method
        self.schemas = schemas
        self._adapters: list[tuple[_Part, TypeAdapter]] = []

        for part in _PARTS:
            schema = getattr(schemas, part.key)
            if schema is None:
                continue
            try:
                self._adapters.append((part, TypeAdapter(schema)))
            except PydanticSchemaGenerationError as exc:
                raise ConfigurationError(
                    f"{method} {part.name} schema {schema!r} is not a type pydantic can validate"
                ) from exc

    @property
    def parts(self) -> tuple[str, ...]:
        """Keys of the parts this validator checks, in evaluation order."""
        return tuple(part.key for part, _ in self._adapters)

    async def __call__(self, request: Request) -> Union[Response, ValidatedRequest]:
        validated: dict[str, Any] = {}

        try:
            for part, adapter in self._adapters:
                data = await part.read(request)
                try:
                    validated[part.key] = adapter.validate_python(data)
                except ValidationError as exc:
                    logger.debug(
                        f"{part.name} validation failed on {request.method} "
                        f"{request.url.path} ({exc.error_count()} issues)"
                    )
                    return validation_failed(part.name, _issues(exc))
        except InvalidJSONBody:
            logger.debug(f"Malformed JSON body on {request.method} {request.url.path}")
            return error_response(INVALID_JSON_MESSAGE, status.HTTP_400_BAD_REQUEST)
        except Exception:
            logger.exception(f"Schema validation error on {request.method} {request.url.path}")
            return error_response("Schema validation error", status.HTTP_500_INTERNAL_SERVER_ERROR)

        return ValidatedRequest(request=request, **validated)

    def __repr__(self) -> str:
        return f"SchemaValidator({self.method}, parts={list(self.parts)})"


def build_schemas(
    schemas: Optional[ValidationSchemas] = None,
    **parts: Any,
) -> ValidationSchemas:
    """
    Accept either a ready ValidationSchemas or body/query/headers/params kwargs.

    Raises:
        ConfigurationError: If both forms are given or an unknown part is named.
    """
    if schemas is not None:
        if any(value is not None for value in parts.values()):
            raise ConfigurationError("Pass either a ValidationSchemas instance or part keywords, not both")
        return schemas

    unknown = set(parts) - {part.key for part in _PARTS}
    if unknown:
        raise ConfigurationError(f"Unknown schema parts: {', '.join(sorted(unknown))}")
    return ValidationSchemas(**parts)
