"""In-memory cache backend implementation."""

import fnmatch
import time
from collections.abc import AsyncIterator, Callable, Iterable
from dataclasses import dataclass
from datetime import timedelta

from cachetools import TLRUCache  # type: ignore[import-untyped]


@dataclass(frozen=True)
class _StoredValue:
    data: bytes
    ttl: float


def _time_to_use(key: str, value: _StoredValue, now: float) -> float:
    return now + value.ttl


class InMemoryCacheBackend:
    """In-memory cache backend using LRU with per-key TTL.

    Suitable for single-process deployments and tests. Uses cachetools'
    TLRUCache so each entry carries its own expiry; entries past their
    TTL are treated as absent on the next access without a sweep.

    The ``timer`` argument lets tests drive expiry with a fake clock.
    """

    def __init__(
        self,
        maxsize: int = 1000,
        default_ttl: float = 3600.0,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the in-memory cache backend.

        Args:
            maxsize: Maximum number of items in the cache.
            default_ttl: Default TTL in seconds for items.
            timer: Clock returning seconds as a float.
        """
        self._maxsize = maxsize
        self._default_ttl = default_ttl
        self._cache: TLRUCache[str, _StoredValue] = TLRUCache(
            maxsize=maxsize,
            ttu=_time_to_use,
            timer=timer,
        )

    async def get(self, key: str) -> bytes | None:
        """Retrieve cached value by key.

        Args:
            key: The cache key to retrieve.

        Returns:
            The cached value as bytes, or None if not found or expired.
        """
        stored = self._cache.get(key)
        return stored.data if isinstance(stored, _StoredValue) else None

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
        self._cache[key] = _StoredValue(value, self._seconds(ttl))

    async def refresh_ttl(self, key: str, ttl: timedelta | None = None) -> bool:
        """Restart the expiry countdown of an existing key.

        Args:
            key: The cache key.
            ttl: New time-to-live. If None, uses default.

        Returns:
            True if the key was live, False otherwise.
        """
        stored = self._cache.get(key)
        if not isinstance(stored, _StoredValue):
            return False
        # Re-inserting recomputes the expiry from the current time.
        self._cache[key] = _StoredValue(stored.data, self._seconds(ttl))
        return True

    async def find_keys(self, pattern: str) -> AsyncIterator[str]:
        """Enumerate live keys matching a glob pattern.

        Args:
            pattern: Glob-style pattern to match keys.

        Yields:
            Matching keys, each at most once.
        """
        self._cache.expire()
        for key in list(self._cache.keys()):
            if fnmatch.fnmatchcase(key, pattern):
                yield key

    async def delete_many(self, keys: Iterable[str]) -> int:
        """Delete a batch of keys.

        Args:
            keys: Keys to delete.

        Returns:
            Number of live keys deleted.
        """
        count = 0
        for key in set(keys):
            if key in self._cache:
                del self._cache[key]
                count += 1
        return count

    async def clear(self) -> None:
        """Clear all cached values."""
        self._cache.clear()

    def _seconds(self, ttl: timedelta | None) -> float:
        if ttl is None:
            return self._default_ttl
        seconds = ttl.total_seconds()
        if seconds <= 0:
            raise ValueError("ttl must be positive")
        return seconds

    def __len__(self) -> int:
        """Return the number of live items in the cache."""
        self._cache.expire()
        return len(self._cache)

    @property
    def maxsize(self) -> int:
        """Return the maximum size of the cache."""
        return self._maxsize
