"""
FastAPI Application
==================

Application factory for the render server, its middleware and exception
handlers, and the server entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from paparazzi.config.settings import get_settings, Settings
from paparazzi.config.logging import get_logger, setup_logging
from paparazzi.config.platform import RuntimeEnvironment, detect_runtime_environment
from paparazzi.core.rendering.dispatcher import RenderDispatcher
from paparazzi.core.rendering.exceptions import (
    ClientDisconnected,
    InvalidParameter,
    RenderError,
    RenderFailed,
    RenderTimeout,
)
from paparazzi.models.schemas import ErrorResponse
from paparazzi.api.routes.health import router as health_router
from paparazzi.api.routes.render import router as render_router
from paparazzi.api.middleware import REQUEST_ID_HEADER, RequestIDMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    dispatcher: RenderDispatcher = app.state.dispatcher
    logger.info(
        "Starting render server",
        renderer=dispatcher.settings.renderer_binary,
        platform=dispatcher.runtime.platform_name,
        max_concurrent_renders=dispatcher.queue.max_concurrent,
        max_queued_renders=dispatcher.queue.max_queued,
    )
    try:
        yield
    finally:
        logger.info("Shutting down render server")


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    error_code: str,
    details: Optional[dict] = None,
) -> JSONResponse:
    error_response = ErrorResponse(
        error=error,
        error_code=error_code,
        details=details,
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=status_code, content=error_response.model_dump(mode="json"))


async def render_exception_handler(request: Request, exc: RenderError) -> JSONResponse:
    """Map render pipeline failures to structured error responses."""
    details = None

    if isinstance(exc, InvalidParameter):
        if exc.parameter:
            details = {"parameter": exc.parameter}
        logger.info("Render request rejected", error_code=exc.error_code, error=str(exc))
    elif isinstance(exc, ClientDisconnected):
        logger.info("Render abandoned by client")
    elif not isinstance(exc, (RenderFailed, RenderTimeout)):
        # renderer failures are logged by the invoker with pid and stderr
        logger.error("Render error", error_code=exc.error_code, error=str(exc))

    return _error_response(request, exc.status_code, exc.user_message, exc.error_code, details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTP exception handler with structured error response."""
    logger.warning("HTTP exception", status_code=exc.status_code, detail=exc.detail)
    response = _error_response(request, exc.status_code, str(exc.detail), str(exc.status_code))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """General exception handler for unexpected errors."""
    logger.error(
        "Unhandled exception",
        exception=str(exc),
        request_id=getattr(request.state, "request_id", None),
        exc_info=True,
    )
    return _error_response(request, 500, "Internal server error", "INTERNAL_ERROR")


def create_app(
    settings: Optional[Settings] = None,
    runtime: Optional[RuntimeEnvironment] = None,
) -> FastAPI:
    """
    Application factory.

    Args:
        settings: Settings to use, defaults to the global settings
        runtime: Startup environment, detected from the host when omitted

    Returns:
        FastAPI application instance
    """
    settings = settings or get_settings()
    runtime = runtime or detect_runtime_environment(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Render map images from URL query parameters",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.dispatcher = RenderDispatcher(settings=settings, runtime=runtime)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_hosts,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(RenderError, render_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(health_router)
    app.include_router(render_router)

    return app


def run_server() -> None:
    """Configure logging, detect the platform, then serve."""
    settings = get_settings()
    setup_logging(settings)
    runtime = detect_runtime_environment(settings)

    uvicorn.run(
        create_app(settings, runtime),
        host=settings.host,
        port=runtime.port,
        log_level=settings.log_level.lower(),
        access_log=True,
        log_config=None,
    )


if __name__ == "__main__":
    run_server()
