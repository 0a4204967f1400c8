"""
Main FastAPI application.

Grocery backend API with:
- Security headers and CORS
- Per-IP rate limiting on /api
- Request ID tracking and structured logging
- MongoDB connection (optional outside production)
- Prometheus metrics
- Frontend serving
"""
import asyncio
import contextlib
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bringit import __version__
from bringit.config import Settings, get_settings
from bringit.database import MongoConnection
from bringit.monitoring.health import HealthCheck
from bringit.monitoring.logging import setup_logging
from bringit.offline import PassthroughWorker

from .frontend import register_frontend
from .middleware import (
    SECURITY_HEADERS,
    RateLimiter,
    is_under_prefix,
    rate_limit_middleware,
    request_id_middleware,
    security_headers_middleware,
)
from .pages import pages_router
from .routes import api_router, monitoring_router

logger = structlog.get_logger(__name__)


async def _connect_database(app: FastAPI, settings: Settings) -> None:
    """
    Connect when MONGODB_URI is set.

    Production waits for the connection and fails startup without it;
    elsewhere the attempt runs in the background and failures are logged.
    """
    connection: MongoConnection = app.state.db
    if not settings.mongodb_uri:
        logger.warning(
            "database_not_configured",
            message="No MONGODB_URI provided - running with sample data",
        )
        return

    if settings.is_production:
        await connection.connect()
        return

    app.state.db_task = asyncio.create_task(connection.connect_or_log())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, Any]:
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    settings: Settings = app.state.settings
    logger.info(
        "application_startup",
        app_name=settings.app_name,
        env=settings.app_env,
        port=settings.port,
        stripe_configured=settings.stripe_key_present,
    )

    await _connect_database(app, settings)
    await app.state.worker.start()

    yield

    logger.info("application_shutdown")
    db_task: Optional[asyncio.Task] = getattr(app.state, "db_task", None)
    if db_task is not None and not db_task.done():
        db_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await db_task
    try:
        await app.state.db.close()
    except Exception as e:
        logger.error("database_shutdown_error", error=str(e))
    await app.state.worker.aclose()


def create_app(
    settings: Optional[Settings] = None,
    connection: Optional[MongoConnection] = None,
    worker: Optional[PassthroughWorker] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Configuration, ``get_settings()`` by default
        connection: Database connection, built from settings by default
        worker: Passthrough worker used for the frontend dev server
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="RB's Grocery API",
        description="Grocery delivery backend: health, sample catalogue and frontend serving.",
        version=__version__,
        lifespan=lifespan,
        docs_url="/swagger",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings
    app.state.db = connection or MongoConnection.from_settings(settings)
    app.state.worker = worker or PassthroughWorker()
    app.state.health = HealthCheck(app.state.db, settings)
    app.state.rate_limiter = RateLimiter(
        settings.rate_limit_max_requests, settings.rate_limit_window_seconds
    )

    # Registration order is inside-out: security headers end up outermost
    app.middleware("http")(rate_limit_middleware(app.state.rate_limiter))
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(security_headers_middleware)

    @app.exception_handler(StarletteHTTPException)
    async def api_not_found_handler(request: Request, exc: StarletteHTTPException) -> Any:
        """JSON 404 body for unknown API endpoints."""
        if exc.status_code == status.HTTP_404_NOT_FOUND and is_under_prefix(request.url.path):
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={
                    "success": False,
                    "message": "API endpoint not found",
                    "path": request.url.path,
                    "method": request.method,
                },
            )
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Global exception handler for unhandled exceptions.

        Runs outside the HTTP middleware stack, so the response headers those
        would add are applied here.
        """
        logger.error(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        message = "Something went wrong" if settings.is_production else str(exc)
        response = JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": message},
            headers=SECURITY_HEADERS,
        )
        request_id = getattr(request.state, "request_id", None)
        if request_id is not None:
            response.headers["X-Request-ID"] = request_id
        return response

    app.include_router(api_router)
    app.include_router(monitoring_router)
    app.include_router(pages_router)
    register_frontend(app, settings, app.state.worker)

    return app


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings)
    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        proxy_headers=True,
    )


if __name__ == "__main__":
    run()
