"""
Request dispatcher: pathname -> route entry -> method handler.

Resolution order:
1. Exact match on the pathname (static endpoints, health checks)
2. Parameterized endpoints, fewest parameters first, then by pattern
3. The catch-all entry (404)

A single-callable entry answers every method. A method table without the
request's method answers 405 without running any middleware or handler.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Request
from fastapi.responses import Response

from filerouter.routing.endpoints import is_parameter, is_parameterized, split_endpoint
from filerouter.routing.responses import method_not_allowed
from filerouter.routing.table import RouteTable
from filerouter.routing.types import CATCH_ALL, RouteEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteMatch:
    """
    Result of resolving a pathname.

    Attributes:
        endpoint: Matched endpoint pattern, or "*" for the catch-all
        entry: The table entry to invoke
        params: Path parameters captured from ":name" segments
    """
    endpoint: str
    entry: RouteEntry
    params: dict[str, str] = field(default_factory=dict)

    @property
    def is_catch_all(self) -> bool:
        return self.endpoint == CATCH_ALL


@dataclass(frozen=True)
class _Pattern:
    endpoint: str
    segments: tuple[str, ...]

    def match(self, parts: tuple[str, ...]) -> Optional[dict[str, str]]:
        if len(parts) != len(self.segments):
            return None

        params: dict[str, str] = {}
        for expected, actual in zip(self.segments, parts):
            if is_parameter(expected):
                if not actual:
                    return None
                params[expected[1:]] = actual
            elif expected != actual:
                return None
        return params


class Dispatcher:
    """
    Resolves requests against a frozen RouteTable.

    Holds no per-request state, so one instance serves every request
    concurrently.
    """

    __slots__ = ("_patterns", "_static", "_table")

    def __init__(self, table: RouteTable):
        self._table = table
        # Pattern keys such as "/users/:id" only match through their pattern
        self._static = frozenset(
            endpoint
            for endpoint in table
            if endpoint != CATCH_ALL and not is_parameterized(endpoint)
        )
        patterns = [
            _Pattern(endpoint, split_endpoint(endpoint))
            for endpoint in table
            if endpoint != CATCH_ALL and is_parameterized(endpoint)
        ]
        patterns.sort(key=lambda p: (sum(is_parameter(s) for s in p.segments), p.endpoint))
        self._patterns: tuple[_Pattern, ...] = tuple(patterns)

    @property
    def table(self) -> RouteTable:
        return self._table

    def resolve(self, pathname: str) -> RouteMatch:
        """Find the entry for a pathname, falling back to the catch-all."""
        if pathname in self._static:
            return RouteMatch(pathname, self._table[pathname])

        # "/users/42" -> ("users", "42"); a trailing slash leaves an empty segment
        parts = tuple(pathname.split("/")[1:])
        for pattern in self._patterns:
            params = pattern.match(parts)
            if params is not None:
                return RouteMatch(pattern.endpoint, self._table[pattern.endpoint], params)

        return RouteMatch(CATCH_ALL, self._table.catch_all)

    async def dispatch(self, request: Request) -> Response:
        """
        Resolve and invoke the handler for one request.

        Returns:
            The handler's response, or a 405 when the endpoint has no handler
            for the request method.
        """
        match = self.resolve(request.url.path)

        if not isinstance(match.entry, Mapping):
            return await match.entry(request)

        method = request.method.upper()
        handler = match.entry.get(method)
        if handler is None:
            logger.debug(f"{method} not allowed on {match.endpoint}")
            return method_not_allowed()

        return await handler(_with_path_params(request, match.params))


def _with_path_params(request: Request, params: dict[str, str]) -> Request:
    """New request over the same ASGI channel, carrying the captured parameters."""
    scope = dict(request.scope)
    scope["path_params"] = dict(params)
    return Request(scope, receive=request.receive)
