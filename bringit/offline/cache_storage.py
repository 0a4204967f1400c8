"""Named response caches keyed by request URL."""
import asyncio
from typing import Dict, List, Optional

import httpx


class Cache:
    """A single named cache of URL to response."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: Dict[str, httpx.Response] = {}

    async def put(self, url: str, response: httpx.Response) -> None:
        self._entries[url] = response

    async def match(self, url: str) -> Optional[httpx.Response]:
        return self._entries.get(url)

    async def delete(self, url: str) -> bool:
        return self._entries.pop(url, None) is not None

    async def keys(self) -> List[str]:
        return list(self._entries)


class CacheStorage:
    """
    Registry of named caches.

    Caches are kept in creation order; ``match`` searches them in that order.
    """

    def __init__(self) -> None:
        self._caches: Dict[str, Cache] = {}
        self._lock = asyncio.Lock()

    async def open(self, name: str) -> Cache:
        """Return the named cache, creating it if needed."""
        async with self._lock:
            if name not in self._caches:
                self._caches[name] = Cache(name)
            return self._caches[name]

    async def has(self, name: str) -> bool:
        return name in self._caches

    async def delete(self, name: str) -> bool:
        """Remove a cache. Returns whether it existed."""
        async with self._lock:
            return self._caches.pop(name, None) is not None

    async def keys(self) -> List[str]:
        return list(self._caches)

    async def match(self, url: str) -> Optional[httpx.Response]:
        for cache in list(self._caches.values()):
            response = await cache.match(url)
            if response is not None:
                return response
        return None
