"""Cache invalidator interface."""

from collections.abc import Iterable
from typing import Protocol


class IInvalidator(Protocol):
    """Contract for pattern-based cache invalidation."""

    async def invalidate(self, patterns: str | Iterable[str]) -> int:
        """Delete every cached key matching any of the patterns.

        Args:
            patterns: One glob pattern or several.

        Returns:
            Number of keys actually removed.

        Raises:
            InvalidationError: If enumeration or deletion failed.
        """
        ...

    def is_stale(self, key: str) -> bool:
        """Check whether a key may hold data from before a failed invalidation."""
        ...
