"""Domain entities for tourcore."""

from tourcore.core.entities.cache_config import CacheConfig
from tourcore.core.entities.cache_entry import CacheEntry, CacheLookup
from tourcore.core.entities.cache_key import CacheKey
from tourcore.core.entities.lifecycle import (
    BookingStatus,
    FlightStatus,
    FollowUpWrite,
    LifecycleRecord,
    ReconciliationResult,
    RecordFilter,
    TourStatus,
)

__all__ = [
    "CacheEntry",
    "CacheLookup",
    "CacheKey",
    "CacheConfig",
    # Lifecycle
    "BookingStatus",
    "FlightStatus",
    "FollowUpWrite",
    "TourStatus",
    "LifecycleRecord",
    "RecordFilter",
    "ReconciliationResult",
]
