"""
filerouter: file-based HTTP routing on top of FastAPI.

Route modules under a ``routes/`` directory each export a ``RouteBuilder``;
the assembler compiles them into a frozen route table that the dispatcher
consults for every request.
"""

import time

# Monotonic reference for the /health uptime; taken before any submodule loads
STARTED_AT = time.monotonic()

from filerouter.routing import RouteBuilder, ValidatedRequest, ValidationSchemas  # noqa: E402

__all__ = ["RouteBuilder", "ValidatedRequest", "ValidationSchemas"]

__version__ = "0.1.0"
