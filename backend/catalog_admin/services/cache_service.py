"""Redis caching for the category listing.

Category pages are expensive (full count aggregation) and read far more
often than written. Every category or product write clears them, since any
write can change a count or the ranking.
"""

from typing import Optional

import structlog
from redis.asyncio import Redis, from_url
from redis.exceptions import RedisError

from catalog_admin.config import settings

logger = structlog.get_logger(__name__)

CATEGORY_KEY_PREFIX = "categories"


class CacheService:
    """Async Redis cache service.

    Redis failures are logged and reported as misses, never raised: the
    catalog keeps working without its cache.
    """

    def __init__(self, redis_url: str, enabled: bool = True):
        """Initialize cache service.

        Args:
            redis_url: Redis connection URL (e.g., "redis://localhost:6379/0")
            enabled: When False every call is a no-op miss
        """
        self.redis_url = redis_url
        self.enabled = enabled
        self._redis: Optional[Redis] = None
        self.logger = logger.bind(service="cache_service")

    async def _get_redis(self) -> Redis:
        if self._redis is None:
            self._redis = from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
            self.logger.info("redis_connection_created", url=self.redis_url)

        return self._redis

    async def get(self, key: str) -> Optional[str]:
        """Get a value from cache, None on miss or error."""
        if not self.enabled:
            return None
        try:
            redis = await self._get_redis()
            value = await redis.get(key)
            self.logger.debug("cache_hit" if value else "cache_miss", key=key)
            return value

        except RedisError as e:
            self.logger.warning("cache_get_failed", key=key, error=str(e))
            return None

    async def set(self, key: str, value: str, ttl: int = 60) -> bool:
        """Set a value with a TTL in seconds. Returns False on error."""
        if not self.enabled:
            return False
        try:
            redis = await self._get_redis()
            await redis.set(key, value, ex=ttl)
            self.logger.debug("cache_set", key=key, ttl=ttl, value_length=len(value))
            return True

        except RedisError as e:
            self.logger.warning("cache_set_failed", key=key, error=str(e))
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching a pattern (e.g. "categories:*").

        Returns:
            Number of keys deleted, 0 on error
        """
        if not self.enabled:
            return 0
        try:
            redis = await self._get_redis()
            keys = [key async for key in redis.scan_iter(match=pattern, count=100)]
            deleted = await redis.delete(*keys) if keys else 0

            self.logger.info("cache_pattern_delete", pattern=pattern, keys_deleted=deleted)
            return deleted

        except RedisError as e:
            self.logger.warning("cache_pattern_delete_failed", pattern=pattern, error=str(e))
            return 0

    async def health_check(self) -> bool:
        try:
            redis = await self._get_redis()
            await redis.ping()
            return True

        except Exception as e:
            self.logger.error("redis_health_check_failed", error=str(e))
            return False

    async def close(self) -> None:
        """Close the Redis connection. Called on application shutdown."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            self.logger.info("redis_connection_closed")


_cache_instance: Optional[CacheService] = None


def get_cache_service() -> CacheService:
    """Get or create the process-wide cache service."""
    global _cache_instance

    if _cache_instance is None:
        _cache_instance = CacheService(settings.REDIS_URL, enabled=settings.CACHE_ENABLED)
        logger.info("cache_service_initialized", redis_url=settings.REDIS_URL, enabled=settings.CACHE_ENABLED)

    return _cache_instance


async def get_cache() -> CacheService:
    """FastAPI dependency for the cache service."""
    return get_cache_service()


def cache_key_for_categories(limit: int, skip: int) -> str:
    return f"{CATEGORY_KEY_PREFIX}:l{limit}:s{skip}"


async def invalidate_category_cache(cache: CacheService) -> int:
    """Drop every cached category page."""
    deleted = await cache.delete_pattern(f"{CATEGORY_KEY_PREFIX}:*")
    logger.info("category_cache_invalidated", keys_deleted=deleted)
    return deleted
