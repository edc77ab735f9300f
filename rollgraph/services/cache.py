"""
In-memory cache of upstream lookups.

Entries are the asyncio tasks that fetch and unwrap a response, stored before
they complete so concurrent identical lookups share one upstream call.
"""

import asyncio
import time
from collections import OrderedDict
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict

from rollgraph.models.envelope import Outcome
from rollgraph.services.urls import UpstreamRequest


class CacheKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    request: UpstreamRequest
    path: str | None = None


class RequestCache:
    """Process-lifetime cache with optional LRU size and TTL bounds"""

    def __init__(
        self,
        max_size: int | None = None,
        ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_size is not None and max_size < 1:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.max_size = max_size
        self.ttl = ttl
        self.clock = clock
        self._entries: OrderedDict[CacheKey, tuple[float, asyncio.Future[Outcome]]] = (
            OrderedDict()
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        return self.get(key) is not None

    def get(self, key: CacheKey) -> asyncio.Future[Outcome] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        stored_at, future = entry
        if self.ttl is not None and self.clock() - stored_at >= self.ttl:
            del self._entries[key]
            return None

        self._entries.move_to_end(key)
        return future

    def put(self, key: CacheKey, future: asyncio.Future[Outcome]) -> None:
        self._entries[key] = (self.clock(), future)
        self._entries.move_to_end(key)
        if self.max_size is not None:
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)

    def discard(self, key: CacheKey, future: asyncio.Future[Outcome] | None = None):
        """Remove ``key``, or only its entry for ``future`` when one is given"""
        entry = self._entries.get(key)
        if entry is None:
            return
        if future is not None and entry[1] is not future:
            return
        del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()
