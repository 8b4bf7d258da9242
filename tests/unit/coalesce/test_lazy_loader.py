"""Unit tests for LazyLoader request coalescing."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from ttlguard.coalesce.lazy_loader import LazyLoader


@pytest.mark.asyncio
class TestLazyLoader:
    async def test_loads_once(self):
        loader = AsyncMock(return_value={"config": True})
        lazy = LazyLoader(loader)

        assert await lazy.get() == {"config": True}
        assert await lazy.get() == {"config": True}
        assert loader.await_count == 1
        assert lazy.loaded is True

    async def test_concurrent_callers_share_one_load(self):
        calls = 0
        release = asyncio.Event()

        async def slow_loader():
            nonlocal calls
            calls += 1
            await release.wait()
            return "value"

        lazy = LazyLoader(slow_loader)
        tasks = [asyncio.create_task(lazy.get()) for _ in range(5)]
        await asyncio.sleep(0)
        assert calls == 1

        release.set()
        results = await asyncio.gather(*tasks)

        assert results == ["value"] * 5
        assert calls == 1

    async def test_none_result_is_memoised(self):
        loader = AsyncMock(return_value=None)
        lazy = LazyLoader(loader)

        assert await lazy.get() is None
        assert await lazy.get() is None
        assert loader.await_count == 1

    async def test_invalidate_forces_reload(self):
        loader = AsyncMock(side_effect=["first", "second"])
        lazy = LazyLoader(loader)

        assert await lazy.get() == "first"
        lazy.invalidate()
        assert lazy.loaded is False
        assert await lazy.get() == "second"

    async def test_failure_reaches_all_waiters_and_allows_retry(self):
        attempts = 0
        release = asyncio.Event()

        async def flaky_loader():
            nonlocal attempts
            attempts += 1
            await release.wait()
            if attempts == 1:
                raise ConnectionError("backend unavailable")
            return "recovered"

        lazy = LazyLoader(flaky_loader)
        tasks = [asyncio.create_task(lazy.get()) for _ in range(3)]
        await asyncio.sleep(0)
        release.set()
        results = await asyncio.gather(*tasks, return_exceptions=True)

        assert all(isinstance(r, ConnectionError) for r in results)
        assert lazy.loaded is False

        assert await lazy.get() == "recovered"
        assert attempts == 2

    async def test_cancelled_load_cancels_waiters(self):
        started = asyncio.Event()

        async def hanging_loader():
            started.set()
            await asyncio.Event().wait()

        lazy = LazyLoader(hanging_loader)
        owner = asyncio.create_task(lazy.get())
        await started.wait()
        waiter = asyncio.create_task(lazy.get())
        await asyncio.sleep(0)

        owner.cancel()
        with pytest.raises(asyncio.CancelledError):
            await owner
        with pytest.raises(asyncio.CancelledError):
            await waiter
        assert lazy.loaded is False

    async def test_invalidate_during_load_discards_result(self):
        release = asyncio.Event()
        values = iter(["stale", "fresh"])

        async def loader():
            await release.wait()
            return next(values)

        lazy = LazyLoader(loader)
        in_flight = asyncio.create_task(lazy.get())
        await asyncio.sleep(0)

        lazy.invalidate()
        release.set()

        assert await in_flight == "stale"
        assert lazy.loaded is False
        assert await lazy.get() == "fresh"
        assert lazy.loaded is True
