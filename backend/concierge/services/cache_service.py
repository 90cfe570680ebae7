# /concierge/services/cache_service.py

import logging
from typing import Optional
import redis.asyncio as redis

from concierge.config.settings import settings
from concierge.utils.metrics import cache_operations

# Owns the shared Redis connection pool. Redis backs the shared admission
# windows when rate_limit_backend is "redis" and is reported by readiness.

logger = logging.getLogger(__name__)


class CacheService:
    def __init__(self, redis_url: str):
        try:
            self.redis_pool = redis.ConnectionPool.from_url(redis_url, max_connections=20)
            self.redis: Optional[redis.Redis] = redis.Redis(connection_pool=self.redis_pool)
        except Exception as e:
            logger.critical(f"Failed to configure Redis at {redis_url}: {e}")
            self.redis = None  # Ensure redis is None if configuration fails

    async def ping(self) -> bool:
        if not self.redis:
            return False
        try:
            await self.redis.ping()
            cache_operations.labels(operation="ping", status="success").inc()
            return True
        except Exception as e:
            cache_operations.labels(operation="ping", status="error").inc()
            logger.warning(f"Redis ping failed: {e}")
            return False

    async def close(self):
        if self.redis:
            await self.redis.aclose()
            logger.info("Redis connection pool closed.")


# Globally accessible instance
cache_service = CacheService(settings.redis_url)
