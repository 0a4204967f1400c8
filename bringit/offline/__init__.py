"""Passthrough offline worker and its cache storage."""
from .cache_storage import Cache, CacheStorage
from .worker import FALLBACK_STATUS_CODE, PassthroughWorker, WorkerState

__all__ = ["Cache", "CacheStorage", "FALLBACK_STATUS_CODE", "PassthroughWorker", "WorkerState"]
