"""Cache backend interface."""

from collections.abc import AsyncIterator, Iterable
from datetime import timedelta
from typing import Protocol


class ICacheBackend(Protocol):
    """Contract for cache storage backends.

    All cache backends must implement this protocol to be used with
    CacheAsideService and PatternInvalidator. Methods are async to
    support both in-memory and networked implementations.

    Backends report a logical miss by returning None and raise
    CacheTransportError only when the store itself cannot be reached.
    """

    async def get(self, key: str) -> bytes | None:
        """Retrieve cached value by key.

        Args:
            key: The cache key to retrieve.

        Returns:
            The cached value as bytes, or None if not found or expired.

        Raises:
            CacheTransportError: If the store is unreachable.
        """
        ...

    async def set(
        self,
        key: str,
        value: bytes,
        ttl: timedelta | None = None,
    ) -> None:
        """Store value, overwriting unconditionally and restarting expiry.

        Args:
            key: The cache key.
            value: The value to store as bytes.
            ttl: Optional time-to-live. If None, uses backend default.
        """
        ...

    async def refresh_ttl(self, key: str, ttl: timedelta | None = None) -> bool:
        """Extend the expiry of an existing key without touching its value.

        Args:
            key: The cache key.
            ttl: New time-to-live. If None, uses backend default.

        Returns:
            True if the key existed, False otherwise (absence is not an error).
        """
        ...

    def find_keys(self, pattern: str) -> AsyncIterator[str]:
        """Enumerate live keys matching a glob pattern.

        Each call starts a fresh, finite enumeration. No key is yielded
        twice within one enumeration.

        Args:
            pattern: Glob-style pattern to match keys.

        Yields:
            Matching keys.
        """
        ...

    async def delete_many(self, keys: Iterable[str]) -> int:
        """Delete a batch of keys.

        Args:
            keys: Keys to delete. Missing keys are ignored.

        Returns:
            Number of keys that existed and were deleted.
        """
        ...
