"""Cache configuration entity."""

from dataclasses import dataclass
from datetime import timedelta

# Matches the lifetime used for cached API responses (one hour).
DEFAULT_TTL = timedelta(hours=1)


@dataclass
class CacheConfig:
    """Cache configuration.

    Sliding Expiration:
        When sliding_expiration=True, every cache hit resets the entry's
        TTL to its full duration, so entries in active use never expire.
        When False, entries expire default_ttl after they were written.
    """

    enabled: bool = True
    default_ttl: timedelta | None = None
    key_prefix: str = "tourcore"
    sliding_expiration: bool = True

    def __post_init__(self) -> None:
        """Set default TTL if not provided and reject non-positive TTLs."""
        if self.default_ttl is None:
            self.default_ttl = DEFAULT_TTL
        if self.default_ttl <= timedelta(0):
            raise ValueError("default_ttl must be positive")
