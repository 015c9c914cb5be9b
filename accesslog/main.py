"""
AccessLog - FastAPI Application Factory
=========================================

What:  Builds a FastAPI application with access logging configured from
       settings. Serves as the reference wiring for host applications and
       as the target of the end-to-end tests.
How:   create_app() resolves the formatter preset, the access logger and
       its level from Settings, installs AccessLogMiddleware and mounts
       the routes.
Who:   uvicorn accesslog.main:app
When:  Once at server startup.

Lifecycle:
    Startup:
    1. Configure logging (root handler + bare-message access handler)
    2. Log the active access log preset
    Shutdown:
    1. Log shutdown
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from accesslog import __version__
from accesslog.config import Settings, settings
from accesslog.formatters import get_formatter
from accesslog.middleware.access_log import AccessLogMiddleware
from accesslog.routes import health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(app_settings: Settings = settings) -> None:
    """
    Configure logging for the application.

    Application logs go through the root logger with a timestamped format.
    Access lines already carry their own timestamp and layout, so the
    access logger gets a dedicated stdout handler that prints the bare
    message and does not propagate to the root handler.
    """
    logging.basicConfig(
        level=getattr(logging, app_settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    access_logger = logging.getLogger(app_settings.access_logger_name)
    access_logger.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    access_logger.addHandler(handler)
    access_logger.setLevel(getattr(logging, app_settings.access_log_level, logging.INFO))
    access_logger.propagate = False

    # uvicorn's own access log would duplicate every line
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging(app.state.settings)
    logger.info(
        "Access logging enabled: format=%s logger=%s",
        app.state.access_log_format,
        app.state.settings.access_logger_name,
    )

    yield

    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register the catch-all handler for unexpected errors.

    Starlette runs Exception handlers in its outermost error middleware, so
    the exception still passes through AccessLogMiddleware first and is
    logged there with status 500.
    """

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred.",
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    app_settings: Optional[Settings] = None,
    access_logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings:   Settings to use; defaults to the module-level instance
        access_logger:  Logger for access lines; defaults to the logger
                        named by settings.access_logger_name
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="AccessLog",
        description="Common/Combined Log Format access logging for ASGI apps.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.access_log_format = app_settings.access_log_format

    app.add_middleware(
        AccessLogMiddleware,
        formatter=get_formatter(app_settings.access_log_format),
        logger=access_logger or logging.getLogger(app_settings.access_logger_name),
        level=getattr(logging, app_settings.access_log_level, logging.INFO),
        skip_paths=app_settings.skip_paths_list,
    )

    register_exception_handlers(app)
    app.include_router(health.router)

    return app


app = create_app()
