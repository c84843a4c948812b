"""Redis cache backend implementation."""

import logging
import math
from collections.abc import AsyncIterator, Iterable
from datetime import timedelta
from typing import TYPE_CHECKING, Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from tourcore.exceptions import CacheTransportError

if TYPE_CHECKING:
    from tourcore.config import Settings

logger = logging.getLogger(__name__)

# Transport failures: anything from the client plus socket-level errors.
_TRANSPORT_ERRORS = (RedisError, OSError, TimeoutError)


class RedisCacheBackend:
    """Redis cache backend for distributed deployments.

    Supports per-key TTL, TTL refresh, SCAN-based pattern enumeration and
    batch deletion. Every client error is reported as CacheTransportError
    so callers can fail open.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        key_prefix: str = "tourcore",
        default_ttl: int = 3600,
        socket_timeout: float | None = 2.0,
        scan_count: int = 100,
        client: Any | None = None,
    ) -> None:
        """Initialize the Redis cache backend.

        Args:
            redis_url: Redis connection URL (``rediss://`` enables TLS).
            key_prefix: Prefix for all cache keys. Empty for no prefix.
            default_ttl: Default TTL in seconds.
            socket_timeout: Per-command timeout in seconds.
            scan_count: COUNT hint for each SCAN page.
            client: Pre-built async client; overrides ``redis_url``.
        """
        if client is None:
            client = redis.from_url(  # type: ignore[no-untyped-call]
                redis_url,
                socket_timeout=socket_timeout,
                socket_connect_timeout=socket_timeout,
            )
        self._redis = client
        self._key_prefix = key_prefix
        self._default_ttl = default_ttl
        self._scan_count = scan_count

    @classmethod
    def from_settings(cls, settings: "Settings") -> "RedisCacheBackend":
        """Build a backend from process settings."""
        return cls(
            redis_url=settings.redis_url,
            key_prefix=settings.cache_prefix,
            default_ttl=settings.cache_ttl,
            socket_timeout=settings.redis_timeout,
        )

    async def get(self, key: str) -> bytes | None:
        """Retrieve cached value by key.

        Args:
            key: The cache key to retrieve.

        Returns:
            The cached value as bytes, or None if not found or expired.

        Raises:
            CacheTransportError: If Redis cannot be reached.
        """
        try:
            value = await self._redis.get(self._prefixed_key(key))
        except _TRANSPORT_ERRORS as e:
            raise CacheTransportError(f"GET {key} failed: {e}") from e
        if isinstance(value, str):
            return value.encode()
        return value

    async def set(
        self,
        key: str,
        value: bytes,
        ttl: timedelta | None = None,
    ) -> None:
        """Store value with optional TTL.

        Args:
            key: The cache key.
            value: The value to store as bytes.
            ttl: Optional time-to-live. If None, uses default.
        """
        try:
            await self._redis.setex(self._prefixed_key(key), self._seconds(ttl), value)
        except _TRANSPORT_ERRORS as e:
            raise CacheTransportError(f"SETEX {key} failed: {e}") from e

    async def refresh_ttl(self, key: str, ttl: timedelta | None = None) -> bool:
        """Reset the expiry of an existing key.

        Args:
            key: The cache key.
            ttl: New time-to-live. If None, uses default.

        Returns:
            True if the key existed, False otherwise.
        """
        try:
            result = await self._redis.expire(self._prefixed_key(key), self._seconds(ttl))
        except _TRANSPORT_ERRORS as e:
            raise CacheTransportError(f"EXPIRE {key} failed: {e}") from e
        return bool(result)

    async def find_keys(self, pattern: str) -> AsyncIterator[str]:
        """Enumerate keys matching a pattern using SCAN.

        Uses SCAN instead of KEYS for production safety. SCAN may return
        a key on more than one page, so yielded keys are deduplicated.

        Args:
            pattern: Redis glob pattern (without the key prefix).

        Yields:
            Matching keys with the prefix stripped.
        """
        seen: set[str] = set()
        cursor = 0
        match = self._prefixed_key(pattern)

        while True:
            try:
                cursor, keys = await self._redis.scan(
                    cursor, match=match, count=self._scan_count
                )
            except _TRANSPORT_ERRORS as e:
                raise CacheTransportError(f"SCAN {pattern} failed: {e}") from e

            for raw in keys:
                key = self._unprefixed_key(raw)
                if key not in seen:
                    seen.add(key)
                    yield key

            if int(cursor) == 0:
                break

    async def delete_many(self, keys: Iterable[str]) -> int:
        """Delete keys in a single DEL command.

        Args:
            keys: Keys to delete (without prefix).

        Returns:
            Number of keys deleted.
        """
        prefixed = [self._prefixed_key(key) for key in dict.fromkeys(keys)]
        if not prefixed:
            return 0
        try:
            return int(await self._redis.delete(*prefixed))
        except _TRANSPORT_ERRORS as e:
            raise CacheTransportError(f"DEL of {len(prefixed)} keys failed: {e}") from e

    async def ping(self) -> bool:
        """Check connectivity; never raises."""
        try:
            return bool(await self._redis.ping())
        except _TRANSPORT_ERRORS as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    def _prefixed_key(self, key: str) -> str:
        """Add prefix to key if not already present."""
        if not self._key_prefix or key.startswith(f"{self._key_prefix}:"):
            return key
        return f"{self._key_prefix}:{key}"

    def _unprefixed_key(self, raw: bytes | str) -> str:
        key = raw.decode() if isinstance(raw, bytes) else raw
        prefix = f"{self._key_prefix}:"
        if self._key_prefix and key.startswith(prefix):
            return key[len(prefix):]
        return key

    def _seconds(self, ttl: timedelta | None) -> int:
        if ttl is None:
            return self._default_ttl
        if ttl.total_seconds() <= 0:
            raise ValueError("ttl must be positive")
        # SETEX and EXPIRE take whole seconds.
        return max(1, math.ceil(ttl.total_seconds()))

    async def close(self) -> None:
        """Close the Redis connection."""
        await self._redis.aclose()

    async def __aenter__(self) -> "RedisCacheBackend":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.close()
