"""
Frontend serving.

Production serves the built single-page app with an ``index.html`` fallback.
Development either answers ``/`` with a pointer to the separately running
frontend, or, when ``FRONTEND_DEV_URL`` is set, passes page requests through
the offline worker to the frontend dev server.
"""
from pathlib import Path
from typing import Any, Dict

import httpx
import structlog
from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import FileResponse

from bringit.config import Settings
from bringit.offline import PassthroughWorker

from .middleware import is_under_prefix

logger = structlog.get_logger(__name__)

STATIC_DIR = Path(__file__).parent / "static"

# Hop-by-hop headers plus ones httpx has already applied to the body
EXCLUDED_PROXY_HEADERS = {
    "connection",
    "content-encoding",
    "content-length",
    "keep-alive",
    "transfer-encoding",
    "host",
}


CATCH_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]


def _guard_page_request(full_path: str, method: str) -> None:
    """Unknown API paths stay 404 for every method; pages are GET-only."""
    if is_under_prefix("/" + full_path):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    if method not in ("GET", "HEAD"):
        raise HTTPException(status_code=status.HTTP_405_METHOD_NOT_ALLOWED)


def _copy_headers(headers: Any) -> Dict[str, str]:
    return {k: v for k, v in headers.items() if k.lower() not in EXCLUDED_PROXY_HEADERS}


async def service_worker_script() -> FileResponse:
    """Browser-side passthrough worker script."""
    return FileResponse(
        STATIC_DIR / "sw.js",
        media_type="application/javascript",
        headers={"Cache-Control": "no-cache", "Service-Worker-Allowed": "/"},
    )


def register_frontend(app: FastAPI, settings: Settings, worker: PassthroughWorker) -> None:
    """Attach frontend routes. Must run after all API routers are included."""
    app.add_api_route("/sw.js", service_worker_script, methods=["GET"], include_in_schema=False)

    if settings.is_production:
        _register_build(app, Path(settings.frontend_build_dir))
    elif settings.frontend_dev_url:
        _register_dev_passthrough(app, settings.frontend_dev_url.rstrip("/"), worker)
    else:
        _register_dev_message(app)


def _register_build(app: FastAPI, build_dir: Path) -> None:
    build_root = build_dir.resolve()
    index_file = build_root / "index.html"
    logger.info("frontend_build_serving", build_dir=str(build_root))

    async def serve_build(full_path: str, request: Request) -> FileResponse:
        _guard_page_request(full_path, request.method)

        candidate = (build_root / full_path).resolve()
        if full_path and candidate.is_file() and candidate.is_relative_to(build_root):
            return FileResponse(candidate)
        if not index_file.is_file():
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return FileResponse(index_file)

    app.add_api_route(
        "/{full_path:path}", serve_build, methods=CATCH_ALL_METHODS, include_in_schema=False
    )


def _register_dev_passthrough(app: FastAPI, dev_url: str, worker: PassthroughWorker) -> None:
    logger.info("frontend_dev_passthrough", frontend_dev_url=dev_url)

    async def passthrough(full_path: str, request: Request) -> Response:
        _guard_page_request(full_path, request.method)

        outbound = httpx.Request(
            "GET",
            f"{dev_url}/{full_path}",
            params=request.url.query or None,
            headers=_copy_headers(request.headers),
        )
        upstream = await worker.fetch(outbound)
        return Response(
            content=upstream.content,
            status_code=upstream.status_code,
            headers=_copy_headers(upstream.headers),
        )

    app.add_api_route(
        "/{full_path:path}", passthrough, methods=CATCH_ALL_METHODS, include_in_schema=False
    )


def _register_dev_message(app: FastAPI) -> None:
    async def development_root() -> Dict[str, str]:
        return {
            "message": "RB's Grocery API - Development Mode",
            "documentation": "/api/docs",
            "health": "/api/health",
            "frontend": "Run frontend separately on port 3000",
        }

    app.add_api_route("/", development_root, methods=["GET"], include_in_schema=False)
