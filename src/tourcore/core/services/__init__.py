"""Domain services for tourcore."""

from tourcore.core.services.cache_aside import CacheAsideService
from tourcore.core.services.invalidator import PatternInvalidator
from tourcore.core.services.lifecycle_policies import (
    BookingDeadlinePolicy,
    FlightStatusPolicy,
    TourStatusPolicy,
)
from tourcore.core.services.reconciliation import ReconciliationJob

__all__ = [
    "CacheAsideService",
    "PatternInvalidator",
    # Reconciliation
    "ReconciliationJob",
    "TourStatusPolicy",
    "FlightStatusPolicy",
    "BookingDeadlinePolicy",
]
