"""Key builder interface."""

from typing import Any, Protocol


class IKeyBuilder(Protocol):
    """Contract for building cache keys for resource reads.

    Key builders must produce keys that fall under the resource's
    invalidation pattern, so a write to a resource can purge every
    cached read of it.
    """

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
            A deterministic string key.
        """
        ...

    def patterns(self, resource: str, identifier: Any | None = None) -> list[str]:
        """Build the glob patterns covering a resource or one record of it.

        The patterns for a single record also cover the resource's list
        reads, since any listing may include that record.
        """
        ...
