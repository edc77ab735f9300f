"""
Rollbar API client used by the GraphQL resolvers
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from rollgraph.errors import TransportFailure
from rollgraph.models.config import RollbarConfig
from rollgraph.models.envelope import Outcome
from rollgraph.services.cache import CacheKey, RequestCache
from rollgraph.services.unwrap import keep, unwrap
from rollgraph.services.urls import UpstreamRequest, UrlBuilder

logger = logging.getLogger(__name__)


class RollbarClient:
    """Fetches and unwraps Rollbar API responses, optionally through a cache"""

    def __init__(
        self,
        config: RollbarConfig,
        cache: RequestCache | None = None,
        session: aiohttp.ClientSession | None = None,
    ):
        self.config = config
        self.cache = cache
        self.urls = UrlBuilder(config.base_url)
        self.session = session
        self._owns_session = session is None

    async def close(self):
        if self.session and self._owns_session:
            await self.session.close()
        self.session = None

    def _log_request(self, request: UpstreamRequest, cached: bool = False):
        label = "GET (cached)" if cached else "GET"
        level = logging.INFO if self.config.verbose else logging.DEBUG
        logger.log(level, f"{label}: {request.describe()}")

    async def _make_request(self, url: str) -> Any:
        """GET ``url`` and decode the JSON body.

        The status code is not checked: Rollbar reports failures in the
        envelope, including for 4xx answers.
        """
        if self.session is None:
            self.session = aiohttp.ClientSession()
            self._owns_session = True

        async with self.session.get(url) as response:
            return await response.json(content_type=None)

    async def _fetch_outcome(
        self, request: UpstreamRequest, path: str | None
    ) -> Outcome:
        try:
            document = await self._make_request(request.url)
            outcome = unwrap(document, path)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise TransportFailure(request.describe(), str(e)) from e

        if outcome.is_failed:
            logger.error(f"Rollbar error for {request.describe()}: {outcome.message}")
        return outcome

    async def fetch(self, request: UpstreamRequest, path: str | None = None) -> Outcome:
        """Fetch ``request`` and unwrap it at ``path``.

        With a cache, the pending task is stored before it is awaited so
        identical concurrent lookups reuse it. Awaiters are shielded so an
        aborted GraphQL request does not cancel a shared fetch.
        """
        if self.cache is None:
            self._log_request(request)
            return await self._fetch_outcome(request, path)

        key = CacheKey(request=request, path=path)
        pending = self.cache.get(key)
        if pending is not None:
            self._log_request(request, cached=True)
            return await asyncio.shield(pending)

        self._log_request(request)
        task = asyncio.ensure_future(self._fetch_outcome(request, path))
        self.cache.put(key, task)
        task.add_done_callback(lambda done: self._evict_failed(key, done))
        return await asyncio.shield(task)

    def _evict_failed(self, key: CacheKey, task: asyncio.Future):
        if task.cancelled() or task.exception() is not None:
            self.cache.discard(key, task)

    async def maybe_get(
        self,
        request: UpstreamRequest,
        path: str | None = None,
        predicate: Callable[[dict[str, Any]], Any] | None = None,
    ) -> Any:
        """Value at ``path`` or None when it is missing or Rollbar reported an error"""
        outcome = await self.fetch(request, path)
        return keep(outcome.value_or_none(), predicate)

    async def gather_each(
        self, requests: list[UpstreamRequest], path: str | None = None
    ) -> list[Any]:
        """Fetch ``requests`` concurrently, keeping order and dropping absent values"""
        values = await asyncio.gather(
            *(self.maybe_get(request, path) for request in requests)
        )

        found = []
        for request, value in zip(requests, values):
            if value is None:
                logger.warning(f"Dropping {request.describe()}: no value returned")
                continue
            found.append(value)
        return found
