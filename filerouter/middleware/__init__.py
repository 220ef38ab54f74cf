"""
Reusable route middleware.

Middleware are plain callables taking the request and returning None/True
(continue), False (403) or a Response (short-circuit).
"""

from filerouter.middleware.logging import log_request

__all__ = ["log_request"]
