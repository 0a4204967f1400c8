"""
HTTP middleware shared by the main API server and the test server.

- Security headers on every response
- Request ID tracking with structured request logging
- Per-client fixed-window rate limiting on a path prefix
"""
import asyncio
import time
import uuid
from typing import Awaitable, Callable, Dict, Tuple

import structlog
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse

from bringit.monitoring.metrics import metrics

logger = structlog.get_logger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]

SECURITY_HEADERS: Dict[str, str] = {
    "Content-Security-Policy": (
        "default-src 'self';base-uri 'self';font-src 'self' https: data:;"
        "form-action 'self';frame-ancestors 'self';img-src 'self' data:;"
        "object-src 'none';script-src 'self';script-src-attr 'none';"
        "style-src 'self' https: 'unsafe-inline';upgrade-insecure-requests"
    ),
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later"


def is_under_prefix(path: str, prefix: str = "/api") -> bool:
    """Whether ``path`` is ``prefix`` itself or a segment below it (not ``/apiary``)."""
    return path == prefix or path.startswith(prefix + "/")


async def security_headers_middleware(request: Request, call_next: CallNext) -> Response:
    """Add hardening headers without overriding ones a route already set."""
    response = await call_next(request)
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


async def request_id_middleware(request: Request, call_next: CallNext) -> Response:
    """
    Add request ID to all requests for tracing.

    Also adds timing information and structured logging context.
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    start_time = time.time()

    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
    )

    try:
        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id

        duration = time.time() - start_time
        route = request.scope.get("route")
        metrics.record_http_request(
            request.method,
            getattr(route, "path", "unmatched"),
            response.status_code,
            duration,
        )
        logger.info(
            "request_completed",
            status_code=response.status_code,
            duration_seconds=duration,
            client_host=request.client.host if request.client else None,
        )

        return response

    except Exception as e:
        logger.error(
            "request_failed",
            error=str(e),
            duration_seconds=time.time() - start_time,
        )
        raise

    finally:
        structlog.contextvars.clear_contextvars()


class RateLimiter:
    """
    Fixed-window request counter keyed by client.

    Each key gets ``max_requests`` per ``window_seconds``; the window starts
    at the key's first request and resets once it has elapsed.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._lock = asyncio.Lock()

    async def hit(self, key: str) -> Tuple[bool, float]:
        """
        Count a request for ``key``.

        Returns:
            Tuple[bool, float]: Whether the request is allowed, and seconds
            until the key's window resets
        """
        async with self._lock:
            now = self._clock()
            window_start, count = self._windows.get(key, (now, 0))
            if now - window_start >= self.window_seconds:
                window_start, count = now, 0

            count += 1
            self._windows[key] = (window_start, count)
            if len(self._windows) > 10_000:
                self._prune(now)

            retry_after = max(0.0, self.window_seconds - (now - window_start))
            return count <= self.max_requests, retry_after

    def _prune(self, now: float) -> None:
        expired = [
            key
            for key, (start, _) in self._windows.items()
            if now - start >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]

    def reset(self) -> None:
        self._windows.clear()


def rate_limit_middleware(
    limiter: RateLimiter, prefix: str = "/api"
) -> Callable[[Request, CallNext], Awaitable[Response]]:
    """Build a middleware applying ``limiter`` to paths under ``prefix``."""

    async def middleware(request: Request, call_next: CallNext) -> Response:
        if not is_under_prefix(request.url.path, prefix):
            return await call_next(request)

        client_key = request.client.host if request.client else "unknown"
        allowed, retry_after = await limiter.hit(client_key)
        if not allowed:
            metrics.record_rate_limited()
            logger.warning("rate_limit_exceeded", client_host=client_key)
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"success": False, "message": RATE_LIMIT_MESSAGE},
                headers={"Retry-After": str(int(retry_after) + 1)},
            )
        return await call_next(request)

    return middleware
