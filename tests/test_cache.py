"""SeasonCache: memoization, single-flight, failure eviction."""

import asyncio

import pytest

from drawview.core.cache import SeasonCache
from drawview.core.errors import FetchError

from helpers import FakeSource, make_pots


def test_second_get_reuses_first_result():
    async def scenario():
        source = FakeSource()
        cache = SeasonCache(source.get)
        first = await cache.get(2020)
        second = await cache.get(2020)
        assert first is second
        assert source.calls == [2020]
        assert 2020 in cache
        assert 2021 not in cache

    asyncio.run(scenario())


def test_concurrent_gets_share_one_load():
    async def scenario():
        source = FakeSource(gated=[2020])
        cache = SeasonCache(source.get)
        waiters = [asyncio.ensure_future(cache.get(2020)) for _ in range(3)]
        await asyncio.sleep(0)
        source.release(2020)
        results = await asyncio.gather(*waiters)
        assert source.calls == [2020]
        assert all(r is results[0] for r in results)

    asyncio.run(scenario())


def test_seasons_are_cached_independently():
    async def scenario():
        source = FakeSource()
        cache = SeasonCache(source.get)
        assert await cache.get(2020) == make_pots(2020)
        assert await cache.get(2021) == make_pots(2021)
        assert source.calls == [2020, 2021]
        assert set(cache.summary()) == {"2020", "2021"}

    asyncio.run(scenario())


def test_failed_load_is_retried():
    async def scenario():
        source = FakeSource(fail=[2020])
        cache = SeasonCache(source.get)
        with pytest.raises(FetchError):
            await cache.get(2020)
        assert 2020 not in cache

        source.fail.clear()
        assert await cache.get(2020) == make_pots(2020)
        assert source.calls == [2020, 2020]
        assert cache.summary().keys() == {"2020"}

    asyncio.run(scenario())


def test_cancelled_waiter_does_not_cancel_shared_load():
    async def scenario():
        source = FakeSource(gated=[2020])
        cache = SeasonCache(source.get)
        first = asyncio.ensure_future(cache.get(2020))
        second = asyncio.ensure_future(cache.get(2020))
        await asyncio.sleep(0)

        first.cancel()
        source.release(2020)
        assert await second == make_pots(2020)
        assert first.cancelled()
        assert source.calls == [2020]

    asyncio.run(scenario())
