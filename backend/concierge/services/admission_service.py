# /concierge/services/admission_service.py

import time
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, runtime_checkable

import redis.asyncio as redis

from concierge.config.settings import settings
from concierge.utils.metrics import admission_counter, cache_operations

# Per-user admission control for chat turns. A fixed window of
# `window_seconds` admits at most `limit` turns; the next one is denied until
# the window elapses. Counters live behind a WindowStore so a multi-instance
# deployment can share them through Redis instead of process memory.

logger = logging.getLogger(__name__)


@runtime_checkable
class WindowStore(Protocol):
    async def hit(self, key: str, window_seconds: int) -> int:
        """Count one request against the key's current window and return the new count."""
        ...


@dataclass
class _Window:
    started_at: float
    count: int


class InMemoryWindowStore:
    """
    Process-local windows. Resets on restart and is not shared across
    workers; good enough for abuse mitigation, not for hard quotas.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._last_sweep = clock()
        # Increment-and-compare must be one step for concurrent turns of one user
        self._lock = threading.Lock()

    async def hit(self, key: str, window_seconds: int) -> int:
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= window_seconds:
                self._sweep(now, window_seconds)
            window = self._windows.get(key)
            if window is None or now - window.started_at >= window_seconds:
                self._windows[key] = _Window(started_at=now, count=1)
                return 1
            window.count += 1
            return window.count

    def _sweep(self, now: float, window_seconds: int):
        # Caller holds the lock
        expired = [key for key, window in self._windows.items() if now - window.started_at >= window_seconds]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now

    def reset(self):
        with self._lock:
            self._windows.clear()

    def __len__(self) -> int:
        return len(self._windows)


class RedisWindowStore:
    """Windows shared through Redis: INCR plus an EXPIRE set only on the first hit."""

    def __init__(self, client: redis.Redis, prefix: str = "admission"):
        self.redis = client
        self.prefix = prefix

    async def hit(self, key: str, window_seconds: int) -> int:
        redis_key = f"{self.prefix}:{key}"
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.incr(redis_key)
            pipe.expire(redis_key, window_seconds, nx=True)
            count, _ = await pipe.execute()
        cache_operations.labels(operation="admission_incr", status="success").inc()
        return int(count)


class Admitter:
    def __init__(self, store: WindowStore, limit: int, window_seconds: int):
        self.store = store
        self.limit = limit
        self.window_seconds = window_seconds

    async def allow(self, user_id: str) -> bool:
        try:
            count = await self.store.hit(user_id, self.window_seconds)
        except Exception as e:
            # A broken shared store must not take chat down with it
            cache_operations.labels(operation="admission_incr", status="error").inc()
            logger.warning(f"Admission store unavailable, admitting user: {e}")
            admission_counter.labels(decision="fail_open").inc()
            return True

        allowed = count <= self.limit
        admission_counter.labels(decision="allowed" if allowed else "denied").inc()
        if not allowed:
            logger.warning(f"Rate limit exceeded for user {user_id} ({count}/{self.limit} in {self.window_seconds}s)")
        return allowed


def build_admitter(redis_client: Optional[redis.Redis] = None) -> Admitter:
    if settings.rate_limit_backend == "redis" and redis_client is not None:
        store: WindowStore = RedisWindowStore(redis_client)
    else:
        store = InMemoryWindowStore()
    logger.info(f"Chat admission using {type(store).__name__} "
                f"({settings.chat_rate_limit_max} per {settings.chat_rate_limit_window_seconds}s).")
    return Admitter(store, settings.chat_rate_limit_max, settings.chat_rate_limit_window_seconds)
