"""Core domain layer for tourcore."""

from tourcore.core.entities import (
    CacheConfig,
    CacheEntry,
    CacheKey,
    CacheLookup,
    LifecycleRecord,
    ReconciliationResult,
    RecordFilter,
)
from tourcore.core.interfaces import (
    ICacheBackend,
    IInvalidator,
    IKeyBuilder,
    ILifecyclePolicy,
    IRecordStore,
    ISerializer,
)
from tourcore.core.services import (
    CacheAsideService,
    PatternInvalidator,
    ReconciliationJob,
)

__all__ = [
    # Entities
    "CacheConfig",
    "CacheEntry",
    "CacheKey",
    "CacheLookup",
    "LifecycleRecord",
    "RecordFilter",
    "ReconciliationResult",
    # Interfaces
    "ICacheBackend",
    "IKeyBuilder",
    "ISerializer",
    "IInvalidator",
    "IRecordStore",
    "ILifecyclePolicy",
    # Services
    "CacheAsideService",
    "PatternInvalidator",
    "ReconciliationJob",
]
