# backend/tests/unit/test_admission.py
import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from concierge.services.admission_service import Admitter, InMemoryWindowStore, RedisWindowStore, WindowStore


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.mark.asyncio
async def test_admits_up_to_limit_then_denies():
    admitter = Admitter(InMemoryWindowStore(), limit=3, window_seconds=60)
    results = [await admitter.allow("user-1") for _ in range(4)]
    assert results == [True, True, True, False]


@pytest.mark.asyncio
async def test_window_resets_after_elapsing():
    clock = FakeClock()
    admitter = Admitter(InMemoryWindowStore(clock=clock), limit=1, window_seconds=60)
    assert await admitter.allow("user-1")
    assert not await admitter.allow("user-1")

    clock.now += 59.9
    assert not await admitter.allow("user-1")

    clock.now += 0.1
    assert await admitter.allow("user-1")


@pytest.mark.asyncio
async def test_users_are_counted_independently():
    store = InMemoryWindowStore()
    admitter = Admitter(store, limit=1, window_seconds=60)
    assert await admitter.allow("user-1")
    assert await admitter.allow("user-2")
    assert not await admitter.allow("user-1")
    assert len(store) == 2

    store.reset()
    assert len(store) == 0


@pytest.mark.asyncio
async def test_expired_windows_age_out():
    clock = FakeClock()
    store = InMemoryWindowStore(clock=clock)
    admitter = Admitter(store, limit=1, window_seconds=60)
    for i in range(1000):
        assert await admitter.allow(f"user-{i}")
    assert len(store) == 1000

    clock.now += 3600
    assert await admitter.allow("late-user")
    assert len(store) == 1


@pytest.mark.asyncio
async def test_live_windows_survive_a_sweep():
    clock = FakeClock()
    store = InMemoryWindowStore(clock=clock)
    admitter = Admitter(store, limit=1, window_seconds=60)
    assert await admitter.allow("old-user")
    clock.now += 30
    assert await admitter.allow("recent-user")
    clock.now += 31
    # old-user expired, recent-user is 31s into its window
    assert await admitter.allow("old-user")
    assert not await admitter.allow("recent-user")
    assert len(store) == 2


@pytest.mark.asyncio
async def test_concurrent_turns_never_exceed_limit():
    admitter = Admitter(InMemoryWindowStore(), limit=10, window_seconds=60)
    results = await asyncio.gather(*(admitter.allow("user-1") for _ in range(25)))
    assert results.count(True) == 10


@pytest.mark.asyncio
async def test_store_failure_fails_open():
    store = MagicMock()
    store.hit = AsyncMock(side_effect=ConnectionError("redis down"))
    admitter = Admitter(store, limit=1, window_seconds=60)
    assert await admitter.allow("user-1")


@pytest.mark.asyncio
async def test_redis_store_increments_and_sets_expiry_once():
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[4, True])
    pipe_cm = MagicMock()
    pipe_cm.__aenter__ = AsyncMock(return_value=pipe)
    pipe_cm.__aexit__ = AsyncMock(return_value=False)
    client = MagicMock()
    client.pipeline.return_value = pipe_cm

    store = RedisWindowStore(client)
    assert await store.hit("user-1", 60) == 4

    client.pipeline.assert_called_once_with(transaction=True)
    pipe.incr.assert_called_once_with("admission:user-1")
    pipe.expire.assert_called_once_with("admission:user-1", 60, nx=True)


def test_stores_satisfy_protocol():
    assert isinstance(InMemoryWindowStore(), WindowStore)
    assert isinstance(RedisWindowStore(MagicMock()), WindowStore)
