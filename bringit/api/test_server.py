"""
Minimal smoke-test server.

Opens a MongoDB connection in the background and answers ``GET /`` with
``Hello``. The database outcome is logged only: the listener serves whether
or not the connection succeeds.
"""
import asyncio
import contextlib
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

import structlog
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from bringit.config import Settings, get_settings
from bringit.database import MongoConnection, redact_uri
from bringit.monitoring.logging import setup_logging

from .middleware import security_headers_middleware

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, Any]:
    connection: MongoConnection = app.state.db
    logger.info("test_server_connecting", uri=redact_uri(connection.uri))

    # Not awaited: startup must not wait on server selection
    task = asyncio.create_task(connection.connect_or_log())
    app.state.db_task = task

    yield

    if not task.done():
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
    await connection.close()


def create_test_app(
    settings: Optional[Settings] = None,
    connection: Optional[MongoConnection] = None,
) -> FastAPI:
    """Build the smoke-test application."""
    settings = settings or get_settings()

    app = FastAPI(title="BringIt test server", lifespan=lifespan, docs_url=None, redoc_url=None)
    app.state.settings = settings
    app.state.db = connection or MongoConnection.from_settings(settings)
    app.middleware("http")(security_headers_middleware)

    @app.get("/", response_class=PlainTextResponse)
    async def hello() -> str:
        return "Hello"

    return app


def run() -> None:
    """Serve the test app with uvicorn."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings)
    logger.info("test_server_starting", port=settings.test_server_port)
    uvicorn.run(
        create_test_app(settings),
        host=settings.api_host,
        port=settings.test_server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
