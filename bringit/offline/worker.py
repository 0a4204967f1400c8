"""
Passthrough offline worker.

Keeps the install/activate/fetch lifecycle of a browser service worker with
all offline caching removed: activation wipes every cache left behind by
earlier versions, and fetches always go to the network. A failed fetch
becomes an empty 503 response instead of an error.
"""
import asyncio
from enum import Enum
from typing import Optional

import httpx
import structlog

from bringit.monitoring.metrics import metrics

from .cache_storage import CacheStorage

logger = structlog.get_logger(__name__)

FALLBACK_STATUS_CODE = 503


class WorkerState(str, Enum):
    """Worker lifecycle states."""

    PARSED = "parsed"
    INSTALLING = "installing"
    INSTALLED = "installed"
    ACTIVATING = "activating"
    ACTIVATED = "activated"


class PassthroughWorker:
    """
    Request interceptor that forwards every request unmodified.

    Args:
        network: Client used for outbound requests. Created (and owned) by
            the worker when omitted.
        caches: Cache storage cleared on activation
    """

    def __init__(
        self,
        network: Optional[httpx.AsyncClient] = None,
        caches: Optional[CacheStorage] = None,
        timeout: float = 30.0,
    ) -> None:
        self._owns_network = network is None
        self.network = network or httpx.AsyncClient(timeout=timeout)
        self.caches = caches if caches is not None else CacheStorage()
        self.state = WorkerState.PARSED
        self.skip_waiting_requested = False
        self.clients_claimed = False

    def skip_waiting(self) -> None:
        """Activate as soon as installation finishes."""
        self.skip_waiting_requested = True

    async def install(self) -> None:
        self.state = WorkerState.INSTALLING
        self.skip_waiting()
        self.state = WorkerState.INSTALLED
        logger.info("worker_installed", skip_waiting=self.skip_waiting_requested)

    async def activate(self) -> None:
        """Delete every cache, then take control of all clients."""
        self.state = WorkerState.ACTIVATING
        names = await self.caches.keys()
        await asyncio.gather(*(self.caches.delete(name) for name in names))
        await self.claim_clients()
        self.state = WorkerState.ACTIVATED
        logger.info("worker_activated", caches_deleted=len(names))

    async def claim_clients(self) -> None:
        self.clients_claimed = True

    async def start(self) -> None:
        """Run the full lifecycle: install, then activate immediately."""
        await self.install()
        await self.activate()

    async def fetch(self, request: httpx.Request) -> httpx.Response:
        """
        Pass the request through to the network.

        Never raises for network failures: connection errors, timeouts and
        other transport problems yield an empty 503 response.
        """
        try:
            response = await self.network.send(request)
        except httpx.HTTPError as e:
            metrics.record_worker_fetch("fallback")
            logger.warning(
                "worker_fetch_failed",
                url=str(request.url),
                error=str(e),
                error_type=type(e).__name__,
            )
            return httpx.Response(FALLBACK_STATUS_CODE, content=b"", request=request)

        metrics.record_worker_fetch("passthrough")
        return response

    async def aclose(self) -> None:
        if self._owns_network:
            await self.network.aclose()
