"""Redis-backed short-lived storage.

Two things live here: the serialized trending feed (keys ``trending:l<limit>``)
and pending phone verification codes (keys ``phone-otp:<user_id>``). A Redis
outage is logged and looks like an empty cache to callers; trending falls back
to the database and phone verification reports an expired code.
"""

from typing import Optional

import structlog
from redis.asyncio import Redis, from_url
from redis.exceptions import RedisError

from spilt_tea.config import settings

logger = structlog.get_logger(__name__)

TRENDING_PREFIX = "trending"
PHONE_OTP_PREFIX = "phone-otp"


class CacheService:
    """Thin async wrapper over one lazily created Redis client."""

    def __init__(self, redis_url: str):
        self.redis_url = redis_url
        self._redis: Optional[Redis] = None
        self.logger = logger.bind(service="cache_service")

    def _client(self) -> Redis:
        if self._redis is None:
            self._redis = from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            self.logger.info("redis_client_created", url=self.redis_url)
        return self._redis

    async def get(self, key: str) -> Optional[str]:
        """Value stored under ``key``; None when absent or Redis is down."""
        try:
            value = await self._client().get(key)
        except RedisError as e:
            self.logger.error("cache_get_failed", key=key, error=str(e))
            return None

        self.logger.debug("cache_hit" if value is not None else "cache_miss", key=key)
        return value

    async def set(self, key: str, value: str, ttl: int = 300) -> bool:
        """Store ``value`` for ``ttl`` seconds. False if the write failed."""
        try:
            await self._client().set(key, value, ex=ttl)
        except RedisError as e:
            self.logger.error("cache_set_failed", key=key, error=str(e))
            return False
        return True

    async def delete(self, key: str) -> bool:
        try:
            removed = await self._client().delete(key)
        except RedisError as e:
            self.logger.error("cache_delete_failed", key=key, error=str(e))
            return False
        return bool(removed)

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern; returns how many went."""
        try:
            client = self._client()
            keys = [key async for key in client.scan_iter(match=pattern, count=100)]
            if not keys:
                return 0
            return await client.delete(*keys)
        except RedisError as e:
            self.logger.error("cache_pattern_delete_failed", pattern=pattern, error=str(e))
            return 0

    async def health_check(self) -> bool:
        try:
            await self._client().ping()
        except (RedisError, OSError) as e:
            self.logger.warning("redis_unreachable", error=str(e))
            return False
        return True

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
            self.logger.info("redis_client_closed")


_cache_instance: Optional[CacheService] = None


def get_cache_service() -> CacheService:
    """Process-wide CacheService, created on first use."""
    global _cache_instance

    if _cache_instance is None:
        _cache_instance = CacheService(settings.REDIS_URL)
    return _cache_instance


async def get_cache() -> CacheService:
    """FastAPI dependency returning the shared CacheService."""
    return get_cache_service()


async def invalidate_trending_cache() -> int:
    """Drop every cached trending list after a vote or post change."""
    deleted = await get_cache_service().delete_pattern(f"{TRENDING_PREFIX}:*")
    logger.info("trending_cache_invalidated", keys_deleted=deleted)
    return deleted


def cache_key_for_trending(limit: int) -> str:
    return f"{TRENDING_PREFIX}:l{limit}"


def cache_key_for_phone_otp(user_id: str) -> str:
    return f"{PHONE_OTP_PREFIX}:{user_id}"
