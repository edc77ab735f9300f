"""
Tests for RequestCache and request deduplication in RollbarClient
"""

import asyncio

import aiohttp
import pytest

from rollgraph.errors import TransportFailure
from rollgraph.services.cache import CacheKey, RequestCache
from rollgraph.services.urls import UrlBuilder


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def make_key(tokens, endpoint, path=None):
    return CacheKey(request=UrlBuilder().account(tokens, endpoint), path=path)


def resolved(value):
    future = asyncio.get_running_loop().create_future()
    future.set_result(value)
    return future


class TestRequestCache:
    @pytest.mark.asyncio
    async def test_get_returns_stored_future(self, tokens):
        cache = RequestCache()
        key = make_key(tokens, "users", "users")
        future = resolved("outcome")

        cache.put(key, future)

        assert cache.get(key) is future
        assert cache.get(make_key(tokens, "users")) is None
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_keys_differ_by_path(self, tokens):
        assert make_key(tokens, "users", "users") != make_key(tokens, "users")
        assert make_key(tokens, "users", "users") == make_key(tokens, "users", "users")

    @pytest.mark.asyncio
    async def test_ttl_expiry(self, tokens):
        clock = FakeClock()
        cache = RequestCache(ttl=10, clock=clock)
        key = make_key(tokens, "teams")
        cache.put(key, resolved("outcome"))

        clock.now = 9.9
        assert key in cache

        clock.now = 10.0
        assert cache.get(key) is None
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_lru_eviction(self, tokens):
        cache = RequestCache(max_size=2)
        first = make_key(tokens, "user/1")
        second = make_key(tokens, "user/2")
        third = make_key(tokens, "user/3")

        cache.put(first, resolved(1))
        cache.put(second, resolved(2))
        cache.get(first)  # first becomes most recently used
        cache.put(third, resolved(3))

        assert first in cache
        assert second not in cache
        assert third in cache

    @pytest.mark.asyncio
    async def test_discard_only_matching_future(self, tokens):
        cache = RequestCache()
        key = make_key(tokens, "teams")
        stored = resolved(1)
        cache.put(key, stored)

        cache.discard(key, resolved(2))
        assert cache.get(key) is stored

        cache.discard(key, stored)
        assert cache.get(key) is None

    def test_invalid_max_size(self):
        with pytest.raises(ValueError):
            RequestCache(max_size=0)


class TestClientDeduplication:
    @pytest.mark.asyncio
    async def test_concurrent_identical_lookups_share_one_call(self, make_client):
        client, fake = make_client(
            {"users": {"err": 0, "result": {"users": []}}}, cache=RequestCache()
        )
        request = client.urls.account(client.config.default_tokens(), "users")

        first, second = await asyncio.gather(
            client.maybe_get(request, "users"), client.maybe_get(request, "users")
        )

        assert first == [] and second == []
        assert client._make_request.call_count == 1

    @pytest.mark.asyncio
    async def test_without_cache_every_lookup_fetches(self, make_client):
        client, fake = make_client({"users": {"err": 0, "result": {"users": []}}})
        request = client.urls.account(client.config.default_tokens(), "users")

        await asyncio.gather(
            client.maybe_get(request, "users"), client.maybe_get(request, "users")
        )

        assert client._make_request.call_count == 2

    @pytest.mark.asyncio
    async def test_different_paths_are_separate_entries(self, make_client):
        client, fake = make_client(
            {"users": {"err": 0, "result": {"users": [{"id": 1}]}}},
            cache=RequestCache(),
        )
        request = client.urls.account(client.config.default_tokens(), "users")

        await client.maybe_get(request, "users")
        await client.maybe_get(request)

        assert client._make_request.call_count == 2

    @pytest.mark.asyncio
    async def test_upstream_error_is_cached(self, make_client):
        client, fake = make_client({}, cache=RequestCache())
        request = client.urls.account(client.config.default_tokens(), "user/9")

        assert await client.maybe_get(request) is None
        assert await client.maybe_get(request) is None

        assert client._make_request.call_count == 1

    @pytest.mark.asyncio
    async def test_transport_failure_is_not_cached(self, make_client):
        client, fake = make_client(
            {"user/9": aiohttp.ClientConnectionError("connection reset")},
            cache=RequestCache(),
        )
        request = client.urls.account(client.config.default_tokens(), "user/9")

        with pytest.raises(TransportFailure):
            await client.maybe_get(request)
        await asyncio.sleep(0)

        assert len(client.cache) == 0
        with pytest.raises(TransportFailure):
            await client.maybe_get(request)
        assert client._make_request.call_count == 2
