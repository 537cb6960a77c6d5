import asyncio
from typing import Optional

from loguru import logger

from shortlink_app.cache.strategies import CacheStrategy, cache_key
from shortlink_app.exceptions import (
    DuplicateShortCodeError,
    ExhaustedRetriesError,
    InvalidURLError,
    NotFoundError,
)
from shortlink_app.services.short_code_strategies import (
    SecureRandomShortCodeStrategy,
    ShortCodeStrategy,
)
from shortlink_app.services.validators import is_valid_url
from shortlink_app.storage.strategies import MappingStore

DEFAULT_SHORT_CODE_LENGTH = 7
DEFAULT_MAX_RETRIES = 5


class ShortenerService:
    """
    Creates, updates, deletes and resolves short URL mappings.

    Everything is injected: the store, the code generator, the optional
    redirect cache and the numeric settings. The service keeps no state
    between calls; uniqueness is left to the store's unique constraint.

    Store calls are blocking (SQLAlchemy session), so they run in a worker
    thread to keep the event loop free.
    """

    def __init__(
        self,
        store: MappingStore,
        generator: Optional[ShortCodeStrategy] = None,
        cache: Optional[CacheStrategy] = None,
        code_length: int = DEFAULT_SHORT_CODE_LENGTH,
        max_retries: int = DEFAULT_MAX_RETRIES,
        cache_ttl: int = 3600,
    ):
        """
        Args:
            store: Mapping store backend
            generator: Short code strategy (secure random if not given)
            cache: Redirect cache (optional)
            code_length: Length of generated short codes
            max_retries: Generation attempts per create before giving up
            cache_ttl: TTL for cached redirects, in seconds
        """
        if code_length <= 0:
            raise ValueError(f"code_length must be positive, got {code_length}")
        if max_retries <= 0:
            raise ValueError(f"max_retries must be positive, got {max_retries}")

        self.store = store
        self.generator = generator or SecureRandomShortCodeStrategy()
        self.cache = cache
        self.code_length = code_length
        self.max_retries = max_retries
        self.cache_ttl = cache_ttl

    @staticmethod
    def validate_url(url: str) -> bool:
        return is_valid_url(url)

    async def create_short_url(self, long_url: str) -> str:
        """
        Return a short code for ``long_url``, creating a mapping if needed.

        Flow:
        1. Validate the URL (no store access when invalid)
        2. Reverse lookup: an existing code is returned as-is
        3. Up to max_retries times: generate a candidate, look it up in the store,
           and save it if free. A candidate that exists, or that loses an
           insert race to a concurrent request, counts as a collision.

        Raises:
            InvalidURLError: URL is not an absolute http(s) URL with a host
            StorageError: the store failed (not retried)
            GenerationError: the random source failed (not retried)
            ExhaustedRetriesError: every candidate collided
        """
        if not self.validate_url(long_url):
            raise InvalidURLError(f"Invalid URL format provided: {long_url!r}")

        existing_code = await asyncio.to_thread(self.store.find_by_long_url, long_url)
        if existing_code:
            logger.info(f"Found existing code {existing_code} for {long_url}")
            return existing_code

        for attempt in range(1, self.max_retries + 1):
            short_code = self.generator.generate(self.code_length)

            try:
                await asyncio.to_thread(self.store.find_by_short_code, short_code)
            except NotFoundError:
                try:
                    await asyncio.to_thread(self.store.save_mapping, short_code, long_url)
                except DuplicateShortCodeError:
                    # Another request saved the same code after our lookup
                    logger.warning(
                        f"Short code {short_code} taken on insert, retrying "
                        f"({attempt}/{self.max_retries})"
                    )
                    continue

                logger.info(f"Created mapping {short_code} -> {long_url}")
                if self.cache:
                    await self.cache.set(cache_key(short_code), long_url, ttl=self.cache_ttl)
                return short_code

            logger.warning(
                f"Short code collision ({short_code}), retrying ({attempt}/{self.max_retries})"
            )

        logger.error(f"Could not generate a unique short code after {self.max_retries} attempts")
        raise ExhaustedRetriesError(
            f"Could not generate unique short code after {self.max_retries} attempts"
        )

    async def update_long_url(self, short_code: str, new_long_url: str) -> None:
        """
        Point ``short_code`` at ``new_long_url``.

        No dedup: two codes may end up pointing at the same URL. The cache
        entry is dropped before and after the write; if dropping it fails
        the call fails with StorageError, since redirects could still serve
        the old URL.

        Raises:
            InvalidURLError: new URL is invalid
            NotFoundError: no mapping for short_code
            StorageError: the store or the cache failed
        """
        if not self.validate_url(new_long_url):
            raise InvalidURLError(f"Invalid new URL format provided: {new_long_url!r}")

        await self._cache_delete(short_code)
        try:
            await asyncio.to_thread(self.store.update_long_url, short_code, new_long_url)
        except NotFoundError:
            logger.info(f"Attempted to update non-existent short code {short_code}")
            raise
        await self._cache_delete(short_code)

        logger.info(f"Updated mapping {short_code} -> {new_long_url}")

    async def delete_mapping(self, short_code: str) -> None:
        """
        Raises:
            NotFoundError: no mapping for short_code
            StorageError: the store or the cache failed
        """
        await self._cache_delete(short_code)
        try:
            await asyncio.to_thread(self.store.delete_mapping, short_code)
        except NotFoundError:
            logger.info(f"Attempted to delete non-existent short code {short_code}")
            raise
        await self._cache_delete(short_code)

        logger.info(f"Deleted mapping {short_code}")

    async def resolve(self, short_code: str) -> str:
        """
        Get the long URL for a redirect (cache-aside).

        On a miss the store value is cached, then read back from the store.
        An update or delete that committed in between would have had its
        invalidation overwritten by our write, so the entry is dropped and
        the fresh value is used.

        Raises:
            NotFoundError: no mapping for short_code
            StorageError: the store failed
        """
        if self.cache:
            cached_url = await self.cache.get(cache_key(short_code))
            if cached_url:
                return cached_url

        long_url = await asyncio.to_thread(self.store.find_by_short_code, short_code)
        if not self.cache:
            return long_url

        await self.cache.set(cache_key(short_code), long_url, ttl=self.cache_ttl)
        try:
            current_url = await asyncio.to_thread(self.store.find_by_short_code, short_code)
        except NotFoundError:
            await self.cache.delete(cache_key(short_code))
            raise

        if current_url != long_url:
            await self.cache.delete(cache_key(short_code))
        return current_url

    async def _cache_delete(self, short_code: str) -> None:
        if self.cache:
            await self.cache.delete(cache_key(short_code))
