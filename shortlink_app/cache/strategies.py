"""
Redirect cache strategies using Strategy Pattern.
Allows switching between different cache backends (Redis, In-Memory, Null).

The cache sits in front of forward lookups (short_code -> long_url). It is
never the source of truth: a failing backend degrades to a cache miss,
except for delete, whose failure is reported so stale redirects are not
silently kept.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Dict, Optional

from loguru import logger
from redis.exceptions import RedisError

from shortlink_app.exceptions import StorageError


def cache_key(short_code: str) -> str:
    """Cache key for a short code"""
    return f"url:{short_code}"


class CacheStrategy(ABC):
    """
    Abstract base class for cache strategies.

    All methods are async so that the service layer does not change when a
    backend does network I/O.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Get value from cache.

        Returns:
            Cached value or None if not found
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        """
        Set value in cache with TTL (seconds).

        Returns:
            True if successful, False otherwise
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete key from cache.

        Returns:
            True if deleted, False if key didn't exist

        Raises:
            StorageError: the backend failed, so the entry may still be there
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        pass

    @abstractmethod
    async def clear(self) -> bool:
        pass


class RedisCache(CacheStrategy):
    """
    Redis cache implementation.

    Shared between workers and servers, with TTL enforced by Redis.
    The client is synchronous, so calls run in a worker thread. Errors are
    logged and reported as a miss / failed write (delete raises).
    """

    def __init__(self, redis_client):
        """
        Args:
            redis_client: Redis client instance (redis.Redis)
        """
        self.redis = redis_client

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await asyncio.to_thread(self.redis.get, key)
        except RedisError as e:
            logger.warning(f"Redis get error for {key}: {e}")
            return None
        return value.decode("utf-8") if value else None

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        try:
            return bool(await asyncio.to_thread(self.redis.setex, key, ttl, value))
        except RedisError as e:
            logger.warning(f"Redis set error for {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        """Raises StorageError: a stale entry would keep serving redirects"""
        try:
            return bool(await asyncio.to_thread(self.redis.delete, key))
        except RedisError as e:
            logger.error(f"Redis delete error for {key}: {e}")
            raise StorageError(f"Failed to invalidate cache entry {key}", cause=e)

    async def exists(self, key: str) -> bool:
        try:
            return bool(await asyncio.to_thread(self.redis.exists, key))
        except RedisError as e:
            logger.warning(f"Redis exists error for {key}: {e}")
            return False

    async def clear(self) -> bool:
        """Clear the whole Redis database (use with caution!)"""
        try:
            await asyncio.to_thread(self.redis.flushdb)
            return True
        except RedisError as e:
            logger.warning(f"Redis clear error: {e}")
            return False


class InMemoryCache(CacheStrategy):
    """
    In-memory cache backed by a dict.

    Per-process only and TTL is not enforced, so an update served by one
    worker is not seen by another worker's cache. Meant for development and
    single-process deployments.
    """

    def __init__(self):
        self._cache: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._cache.get(key)

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        # TTL is ignored
        self._cache[key] = value
        return True

    async def delete(self, key: str) -> bool:
        return self._cache.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        return key in self._cache

    async def clear(self) -> bool:
        self._cache.clear()
        return True


class NullCache(CacheStrategy):
    """
    Null Object Pattern - cache that does nothing.

    Every lookup goes straight to the store. Default backend.
    """

    async def get(self, key: str) -> Optional[str]:
        return None

    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        return True

    async def delete(self, key: str) -> bool:
        return True

    async def exists(self, key: str) -> bool:
        return False

    async def clear(self) -> bool:
        return True
