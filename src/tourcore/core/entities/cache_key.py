"""Cache key value object."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheKey:
    """Immutable cache key value object.

    Keys are colon-separated: ``<resource>[:<identifier>][:<params_hash>]``.
    Every key of a resource therefore matches the ``<resource>:*`` pattern.
    """

    resource: str
    identifier: str | None = None
    params_hash: str | None = None

    def __str__(self) -> str:
        """Return the full cache key string."""
        parts = [self.resource]
        if self.identifier is not None:
            parts.append(self.identifier)
        if self.params_hash is not None:
            parts.append(self.params_hash)
        return ":".join(parts)

    @property
    def pattern(self) -> str:
        """Glob pattern matching every key of this key's resource."""
        return f"{self.resource}:*"

    @classmethod
    def from_components(
        cls,
        resource: str,
        identifier: Any | None = None,
        params: dict[str, Any] | None = None,
    ) -> "CacheKey":
        """Create a CacheKey from raw components.

        Args:
            resource: Resource collection name (e.g. ``tour``).
            identifier: Record id, or None for collection-level keys.
            params: Query parameters; hashed so equivalent queries share a key.

        Returns:
            A new CacheKey instance.
        """
        from tourcore.utils.hashing import hash_value

        return cls(
            resource=resource,
            identifier=str(identifier) if identifier is not None else None,
            params_hash=hash_value(params) if params else None,
        )
