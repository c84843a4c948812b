"""Default key builder implementation."""

from typing import Any

from tourcore.core.entities.cache_key import CacheKey
from tourcore.utils.hashing import drop_empty


class ResourceKeyBuilder:
    """Key builder for resource reads.

    Produces keys such as ``tour:42`` for a single record and
    ``tour:list:3f2a...`` for a filtered listing, so that
    ``tour:*`` covers every cached read of tours.
    """

    def __init__(self, list_marker: str = "list") -> None:
        self._list_marker = list_marker

    def build(
        self,
        resource: str,
        identifier: Any | None = None,
        params: dict[str, Any] | None = None,
    ) -> str:
        """Build a cache key for a resource read.

        Args:
            resource: Resource collection name.
            identifier: Record id for single-record reads.
            params: Query parameters for list reads.

        Returns:
            The cache key string.
        """
        _check_segment(resource)
        cleaned = drop_empty(params)
        if identifier is None:
            identifier = self._list_marker
        return str(CacheKey.from_components(resource, identifier, cleaned))

    def patterns(self, resource: str, identifier: Any | None = None) -> list[str]:
        """Build the invalidation patterns for a resource or one of its records.

        Args:
            resource: Resource collection name.
            identifier: Record id; None covers the whole collection.

        Returns:
            Glob patterns to pass to the invalidator.
        """
        _check_segment(resource)
        if identifier is None:
            return [CacheKey(resource=resource).pattern]
        record_key = str(CacheKey.from_components(resource, identifier))
        return [
            record_key,
            f"{record_key}:*",
            f"{resource}:{self._list_marker}*",
        ]


def _check_segment(resource: str) -> None:
    if not resource or any(ch in resource for ch in ":*?[]"):
        raise ValueError(f"Invalid resource name: {resource!r}")
