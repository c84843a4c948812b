"""Cache-aside service - read-through access with sliding expiration."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Any, TypeVar

from tourcore.core.entities.cache_config import CacheConfig
from tourcore.core.entities.cache_entry import CacheEntry, CacheLookup
from tourcore.core.interfaces.cache_backend import ICacheBackend
from tourcore.core.interfaces.invalidator import IInvalidator
from tourcore.core.interfaces.serializer import ISerializer
from tourcore.exceptions import CacheTransportError, SerializationError
from tourcore.infrastructure.serializers.json import JsonSerializer

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheAsideService:
    """Domain service implementing cache-aside reads.

    A lookup either returns a hit (and slides the entry's TTL forward) or
    tells the caller to compute the value itself and hand it back through
    ``populate``. Cache failures never reach the caller: a transport error
    or timeout is logged and reported as a miss.
    """

    def __init__(
        self,
        backend: ICacheBackend,
        serializer: ISerializer | None = None,
        config: CacheConfig | None = None,
        invalidator: IInvalidator | None = None,
        operation_timeout: float | None = None,
    ) -> None:
        """Initialize the cache-aside service.

        Args:
            backend: The cache backend to use for storage.
            serializer: Encoder for cached values. Defaults to JSON.
            config: Optional cache configuration. Uses defaults if not provided.
            invalidator: When given, keys covered by a failed invalidation
                are bypassed until that invalidation succeeds.
            operation_timeout: Seconds before a backend call is abandoned
                and treated as a miss.
        """
        self._backend = backend
        self._serializer = serializer or JsonSerializer()
        self._config = config or CacheConfig()
        self._invalidator = invalidator
        self._operation_timeout = operation_timeout

        # Statistics
        self._hits = 0
        self._misses = 0
        self._errors = 0
        self._bypassed = 0

    @property
    def config(self) -> CacheConfig:
        """Get the cache configuration."""
        return self._config

    @property
    def stats(self) -> dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary with hits, misses, transport errors, bypassed
            lookups and total lookups.
        """
        return {
            "hits": self._hits,
            "misses": self._misses,
            "errors": self._errors,
            "bypassed": self._bypassed,
            "total": self._hits + self._misses,
        }

    async def lookup(self, key: str, ttl: timedelta | None = None) -> CacheLookup:
        """Look up a key, refreshing its TTL on a hit.

        Args:
            key: The cache key.
            ttl: TTL to slide to on a hit. Uses config default if not provided.

        Returns:
            A CacheLookup; on a miss the caller computes the value and
            calls ``populate``.
        """
        if not self._config.enabled:
            return CacheLookup.miss(key)

        if self._is_stale(key):
            self._bypassed += 1
            self._misses += 1
            logger.debug(f"Cache bypass (pending invalidation): {key}")
            return CacheLookup.miss(key)

        try:
            cached_data = await self._call(self._backend.get(key))
        except CacheTransportError as e:
            self._errors += 1
            self._misses += 1
            logger.warning(f"Cache lookup failed for {key}, falling back: {e}")
            return CacheLookup.miss(key, error=e)

        if cached_data is None:
            self._misses += 1
            logger.debug(f"Cache miss: {key}")
            return CacheLookup.miss(key)

        try:
            value = self._serializer.deserialize(cached_data)
        except SerializationError as e:
            self._misses += 1
            logger.warning(f"Discarding undecodable cache entry {key}: {e}")
            return CacheLookup.miss(key, error=e)

        if self._config.sliding_expiration:
            await self._refresh(key, ttl)

        self._hits += 1
        logger.debug(f"Cache hit: {key}")
        return CacheLookup.found(key, value)

    async def populate(
        self,
        key: str,
        value: Any,
        ttl: timedelta | None = None,
    ) -> CacheEntry | None:
        """Store a freshly computed value.

        Args:
            key: The cache key.
            value: The value to cache.
            ttl: Optional TTL. Uses config default if not provided.

        Returns:
            The written CacheEntry, or None if nothing was stored.
        """
        if not self._config.enabled or self._is_stale(key):
            return None

        effective_ttl = ttl or self._config.default_ttl
        try:
            serialized = self._serializer.serialize(value)
        except SerializationError as e:
            logger.warning(f"Not caching {key}: {e}")
            return None

        try:
            await self._call(self._backend.set(key, serialized, effective_ttl))
        except CacheTransportError as e:
            self._errors += 1
            logger.warning(f"Cache write failed for {key}: {e}")
            return None

        return CacheEntry.create(key=key, value=value, ttl=effective_ttl)

    async def get_or_compute(
        self,
        key: str,
        compute: Callable[[], Awaitable[T]],
        ttl: timedelta | None = None,
    ) -> T:
        """Return the cached value, or compute, cache and return it.

        Errors raised by ``compute`` propagate unchanged and nothing is cached.
        """
        result = await self.lookup(key, ttl)
        if result.hit:
            return result.value  # type: ignore[no-any-return]

        value = await compute()
        await self.populate(key, value, ttl)
        return value

    def reset_stats(self) -> None:
        """Zero the hit/miss counters."""
        self._hits = 0
        self._misses = 0
        self._errors = 0
        self._bypassed = 0

    async def _refresh(self, key: str, ttl: timedelta | None) -> None:
        try:
            await self._call(
                self._backend.refresh_ttl(key, ttl or self._config.default_ttl)
            )
        except CacheTransportError as e:
            self._errors += 1
            logger.warning(f"TTL refresh failed for {key}: {e}")

    def _is_stale(self, key: str) -> bool:
        return self._invalidator is not None and self._invalidator.is_stale(key)

    async def _call(self, awaitable: Awaitable[T]) -> T:
        if self._operation_timeout is None:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, self._operation_timeout)
        except asyncio.TimeoutError as e:
            raise CacheTransportError(
                f"Cache call timed out after {self._operation_timeout}s"
            ) from e
