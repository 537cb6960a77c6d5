"""
Factory for creating cache instances.
"""

from enum import Enum

from loguru import logger

from .strategies import CacheStrategy, InMemoryCache, NullCache, RedisCache


class CacheBackend(Enum):
    """Available cache backends"""
    REDIS = "redis"
    MEMORY = "memory"
    NULL = "null"


class CacheFactory:
    """
    Simple factory for creating cache instances.

    Called once at startup; the app keeps the instance on app.state.
    """

    @classmethod
    def create(cls, backend: CacheBackend, redis_url: str = "redis://localhost:6379/0") -> CacheStrategy:
        """
        Create a cache instance.

        A Redis backend that cannot be reached falls back to the in-memory
        cache.

        Args:
            backend: Type of cache backend (from enum)
            redis_url: Connection URL for the Redis backend

        Raises:
            ValueError: If backend is unknown
        """
        if backend == CacheBackend.REDIS:
            import redis

            try:
                redis_client = redis.from_url(
                    redis_url,
                    decode_responses=False,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )
                # Test connection immediately
                redis_client.ping()
            except redis.RedisError as e:
                logger.warning(f"Redis connection failed ({e}), falling back to in-memory cache")
                return InMemoryCache()

            logger.info("Redis cache initialized")
            return RedisCache(redis_client)

        elif backend == CacheBackend.MEMORY:
            logger.info("In-memory cache initialized")
            return InMemoryCache()

        elif backend == CacheBackend.NULL:
            logger.info("Cache disabled (null cache)")
            return NullCache()

        else:
            raise ValueError(f"Unknown cache backend: {backend}")
