"""
AccessLog - Access Log Middleware
===================================

What:  ASGI middleware writing one Common/Combined Log Format line per
       HTTP request.
How:   For every HTTP request a LogWriter is wrapped around the server's
       `send` channel and handed to the next app as its `send`. The writer
       buffers the body and logs when the response completes.
Who:   Installed in a Starlette/FastAPI app, either with add_middleware or
       by wrapping an ASGI app with one of the decorator factories below.
When:  Once per request; no state survives between requests.

Usage:
    app.add_middleware(AccessLogMiddleware, formatter=combined_log_formatter)

    app = common_log_middleware(logger=my_logger)(app)

    Starlette(middleware=[log_middleware_spec(common_log_formatter)])

Logger:
    The logger is injected. When none is given, the middleware logs to
    logging.getLogger("accesslog.access"); configuring handlers on that
    logger decides where lines go.

Failures:
    If the app raises, is cancelled or returns before completing the
    response, a line is still emitted (status 500 when no response was
    started) and any exception propagates unchanged.
"""

import logging
from typing import Callable, Iterable, Optional

from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.types import ASGIApp, Receive, Scope, Send

from accesslog.formatters import combined_log_formatter, common_log_formatter
from accesslog.sinks import SendSink
from accesslog.writer import Formatter, LogWriter

DEFAULT_LOGGER_NAME = "accesslog.access"

MiddlewareFactory = Callable[[ASGIApp], ASGIApp]


class AccessLogMiddleware:
    """
    Captures response data and writes it to the access logger using the
    given formatter.

    Args:
        app:         The next ASGI app in the chain
        formatter:   Builds the log line; defaults to the Common Log Format
        logger:      Receives the line; defaults to "accesslog.access"
        level:       Level lines are logged at
        skip_paths:  Exact request paths passed through without logging
    """

    def __init__(
        self,
        app: ASGIApp,
        formatter: Formatter = common_log_formatter,
        logger: Optional[logging.Logger] = None,
        level: int = logging.INFO,
        skip_paths: Iterable[str] = (),
    ):
        self.app = app
        self.formatter = formatter
        self.logger = logger if logger is not None else logging.getLogger(DEFAULT_LOGGER_NAME)
        self.level = level
        self.skip_paths = frozenset(skip_paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope.get("path") in self.skip_paths:
            await self.app(scope, receive, send)
            return

        writer = LogWriter(
            Request(scope, receive),
            SendSink(send),
            self.formatter,
            self.logger,
            level=self.level,
        )

        try:
            await self.app(scope, receive, writer)
        finally:
            # The server answers 500 when the app never started a response
            if not writer.response.started:
                writer.response.status = 500
            # No-op when the response already completed through writer.close()
            writer.log()


def log_middleware(
    formatter: Formatter,
    logger: Optional[logging.Logger] = None,
    **options,
) -> MiddlewareFactory:
    """Returns a decorator wrapping an ASGI app in AccessLogMiddleware."""

    def decorator(app: ASGIApp) -> ASGIApp:
        return AccessLogMiddleware(app, formatter=formatter, logger=logger, **options)

    return decorator


def log_middleware_spec(
    formatter: Formatter,
    logger: Optional[logging.Logger] = None,
    **options,
) -> Middleware:
    """Middleware entry for `Starlette(middleware=[...])` / `FastAPI(middleware=[...])`."""
    return Middleware(AccessLogMiddleware, formatter=formatter, logger=logger, **options)


def common_log_middleware(logger: Optional[logging.Logger] = None, **options) -> MiddlewareFactory:
    """Access logging in the Common Log Format."""
    return log_middleware(common_log_formatter, logger, **options)


def combined_log_middleware(logger: Optional[logging.Logger] = None, **options) -> MiddlewareFactory:
    """Access logging in the Combined Log Format."""
    return log_middleware(combined_log_formatter, logger, **options)
