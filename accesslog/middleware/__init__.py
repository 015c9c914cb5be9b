# Middleware package init
"""
AccessLog - Middleware Package
================================

What:  The ASGI access-log middleware and its factory helpers.

Placement:
    Add the access-log middleware last so it runs first and wraps the
    whole chain:
        Request → [Access Log] → [other middleware] → Route Handler
    Responses flow back through it, so the line reflects the final status
    and the exact bytes sent to the client (compressed size included when
    GZip sits inside it).
"""

from accesslog.middleware.access_log import (
    DEFAULT_LOGGER_NAME,
    AccessLogMiddleware,
    combined_log_middleware,
    common_log_middleware,
    log_middleware,
    log_middleware_spec,
)

__all__ = [
    "DEFAULT_LOGGER_NAME",
    "AccessLogMiddleware",
    "combined_log_middleware",
    "common_log_middleware",
    "log_middleware",
    "log_middleware_spec",
]
