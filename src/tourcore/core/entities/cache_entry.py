"""Cache entry entity."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    """Immutable cache entry value object.

    Describes a value written to the cache store together with the
    expiry countdown it was given. Expiry itself is tracked by the store.
    """

    key: str
    value: Any
    created_at: datetime
    ttl: timedelta | None = None

    @classmethod
    def create(
        cls,
        key: str,
        value: Any,
        ttl: timedelta | None = None,
    ) -> "CacheEntry":
        """Factory method to create a new cache entry.

        Args:
            key: The cache key.
            value: The value to cache.
            ttl: Optional time-to-live.

        Returns:
            A new CacheEntry instance.
        """
        return cls(
            key=key,
            value=value,
            created_at=datetime.now(timezone.utc),
            ttl=ttl,
        )


@dataclass(frozen=True)
class CacheLookup:
    """Outcome of a cache-aside lookup.

    ``hit`` is False both for a genuine miss and for a lookup that failed
    open; ``error`` tells the two apart for observability.
    """

    key: str
    hit: bool
    value: Any = None
    error: Exception | None = None

    @classmethod
    def miss(cls, key: str, error: Exception | None = None) -> "CacheLookup":
        return cls(key=key, hit=False, error=error)

    @classmethod
    def found(cls, key: str, value: Any) -> "CacheLookup":
        return cls(key=key, hit=True, value=value)
