"""
Exception hierarchy for the routing layer.

Configuration errors are raised to route authors at definition time.
Load errors are raised by the module loader and caught by the assembler,
which logs them and skips the broken route module.
"""

from pathlib import Path
from typing import Optional


class RouterError(Exception):
    """Base class for all routing errors."""


class ConfigurationError(RouterError, ValueError):
    """A route definition or the routes tree is misconfigured."""


class DuplicateHandlerError(ConfigurationError):
    """A second handler was registered for the same method."""

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"Handler for {method} already defined.")


class DuplicateSchemaError(ConfigurationError):
    """A second schema set was registered for the same method."""

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"Schemas for {method} already defined.")


class EndpointCollisionError(ConfigurationError):
    """Two sources derive the same endpoint pattern."""

    def __init__(self, endpoint: str, first: str, second: str):
        self.endpoint = endpoint
        self.first = first
        self.second = second
        super().__init__(
            f"Endpoint {endpoint!r} is defined by both {first} and {second}"
        )


class RouteLoadError(RouterError):
    """A route module could not be imported or exports no usable router."""

    def __init__(self, source: Path, reason: str, cause: Optional[BaseException] = None):
        self.source = source
        self.reason = reason
        self.cause = cause
        super().__init__(f"Failed to load {source}: {reason}")


class InvalidMiddlewareResult(RouterError, TypeError):
    """Middleware returned something other than None, a bool, or a Response."""
