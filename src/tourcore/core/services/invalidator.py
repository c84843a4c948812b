"""Pattern-based cache invalidation."""

import asyncio
import fnmatch
import logging
from collections.abc import Iterable

from tourcore.core.interfaces.cache_backend import ICacheBackend
from tourcore.exceptions import CacheTransportError, InvalidationError

logger = logging.getLogger(__name__)


class PatternInvalidator:
    """Deletes every cached key matching a set of glob patterns.

    Patterns are enumerated concurrently and the matching keys are
    collected into one set before a single batch delete, so a key
    matched by several patterns is deleted once.

    When an invalidation fails, its patterns are kept as pending and
    ``is_stale`` reports any key they match. Readers use this to bypass
    the cache for those keys until ``retry_pending`` succeeds.
    """

    def __init__(self, backend: ICacheBackend) -> None:
        self._backend = backend
        self._pending: set[str] = set()

    @property
    def pending_patterns(self) -> frozenset[str]:
        """Patterns whose last invalidation failed."""
        return frozenset(self._pending)

    async def invalidate(self, patterns: str | Iterable[str]) -> int:
        """Delete every key matching any of the patterns.

        Must be called after the authoritative write has completed.

        Args:
            patterns: One glob pattern or several.

        Returns:
            Number of keys actually removed.

        Raises:
            InvalidationError: If enumerating any pattern or the batch
                delete failed. No keys are deleted when enumeration fails.
        """
        if isinstance(patterns, str):
            pattern_list = [patterns]
        else:
            pattern_list = list(dict.fromkeys(patterns))
        if not pattern_list:
            return 0

        results = await asyncio.gather(
            *(self._collect(pattern) for pattern in pattern_list),
            return_exceptions=True,
        )

        keys: set[str] = set()
        for pattern, result in zip(pattern_list, results):
            if isinstance(result, BaseException):
                self._pending.update(pattern_list)
                if not isinstance(result, Exception):
                    raise result
                logger.error(f"Failed to enumerate cache keys for {pattern!r}: {result}")
                raise InvalidationError(
                    f"Key enumeration failed for pattern {pattern!r}: {result}",
                    patterns=tuple(pattern_list),
                ) from result
            keys |= result

        deleted = 0
        if keys:
            try:
                deleted = await self._backend.delete_many(keys)
            except CacheTransportError as e:
                self._pending.update(pattern_list)
                logger.error(f"Failed to delete {len(keys)} cache keys: {e}")
                raise InvalidationError(
                    f"Batch delete of {len(keys)} keys failed: {e}",
                    patterns=tuple(pattern_list),
                ) from e

        self._pending.difference_update(pattern_list)
        logger.debug(f"Invalidated {deleted} keys for {pattern_list}")
        return deleted

    async def retry_pending(self) -> int:
        """Re-run invalidation for every pending pattern.

        Returns:
            Number of keys removed (0 if nothing was pending).
        """
        if not self._pending:
            return 0
        return await self.invalidate(sorted(self._pending))

    def is_stale(self, key: str) -> bool:
        """Check whether a key matches a pattern whose invalidation failed."""
        return any(fnmatch.fnmatchcase(key, pattern) for pattern in self._pending)

    async def _collect(self, pattern: str) -> set[str]:
        return {key async for key in self._backend.find_keys(pattern)}
