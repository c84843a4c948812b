"""tourcore - caching and status reconciliation for a tour booking API.

Provides a cache-aside accessor with sliding expiration over Redis (or an
in-memory store), pattern-based invalidation for write-then-invalidate
updates, and periodic jobs that keep tour, flight and booking statuses in
line with the clock.

Example:
    from tourcore import (
        CacheAsideService,
        PatternInvalidator,
        RedisCacheBackend,
        ResourceKeyBuilder,
        Settings,
    )

    settings = Settings.from_env()
    backend = RedisCacheBackend.from_settings(settings)
    invalidator = PatternInvalidator(backend)
    cache = CacheAsideService(
        backend,
        config=settings.cache_config(),
        invalidator=invalidator,
    )
    keys = ResourceKeyBuilder()

    async def get_tour(tour_id: int) -> dict:
        return await cache.get_or_compute(
            keys.build("tour", tour_id),
            lambda: db.fetch_tour(tour_id),
        )

    async def update_tour(tour_id: int, data: dict) -> dict:
        tour = await db.update_tour(tour_id, data)
        await invalidator.invalidate(keys.patterns("tour", tour_id))
        return tour

Status jobs:
    from tourcore.jobs import build_default_scheduler

    scheduler = build_default_scheduler(
        settings, tours=tour_store, flights=flight_store, bookings=booking_store,
        invalidator=invalidator,
    )
    await scheduler.start()
"""

from tourcore.config import Settings, configure_logging
from tourcore.core.entities import (
    BookingStatus,
    CacheConfig,
    CacheEntry,
    CacheKey,
    CacheLookup,
    FlightStatus,
    FollowUpWrite,
    LifecycleRecord,
    ReconciliationResult,
    RecordFilter,
    TourStatus,
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
    BookingDeadlinePolicy,
    CacheAsideService,
    FlightStatusPolicy,
    PatternInvalidator,
    ReconciliationJob,
    TourStatusPolicy,
)
from tourcore.decorators import cached, invalidates
from tourcore.exceptions import (
    CacheTransportError,
    CandidateFetchError,
    InvalidationError,
    RecordNotFoundError,
    RecordStoreError,
    SerializationError,
    TourCoreError,
)
from tourcore.infrastructure import (
    InMemoryCacheBackend,
    InMemoryRecordStore,
    JsonSerializer,
    RedisCacheBackend,
    ResourceKeyBuilder,
)
from tourcore.jobs import JobScheduler, ScheduledJob, build_default_scheduler

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Configuration
    "Settings",
    "configure_logging",
    "CacheConfig",
    # Core entities
    "CacheEntry",
    "CacheKey",
    "CacheLookup",
    "LifecycleRecord",
    "RecordFilter",
    "ReconciliationResult",
    "TourStatus",
    "FlightStatus",
    "FollowUpWrite",
    "BookingStatus",
    # Core interfaces
    "ICacheBackend",
    "IKeyBuilder",
    "ISerializer",
    "IInvalidator",
    "IRecordStore",
    "ILifecyclePolicy",
    # Core services
    "CacheAsideService",
    "PatternInvalidator",
    "ReconciliationJob",
    "TourStatusPolicy",
    "FlightStatusPolicy",
    "BookingDeadlinePolicy",
    # Infrastructure implementations
    "InMemoryCacheBackend",
    "RedisCacheBackend",
    "InMemoryRecordStore",
    "ResourceKeyBuilder",
    "JsonSerializer",
    # Jobs
    "JobScheduler",
    "ScheduledJob",
    "build_default_scheduler",
    # Decorators
    "cached",
    "invalidates",
    # Errors
    "TourCoreError",
    "CacheTransportError",
    "SerializationError",
    "InvalidationError",
    "RecordStoreError",
    "RecordNotFoundError",
    "CandidateFetchError",
]
