"""Lifecycle records and their status enumerations."""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any


class TourStatus(str, Enum):
    """Status of a tour."""

    UPCOMING = "UPCOMING"
    ONGOING = "ONGOING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class FlightStatus(str, Enum):
    """Status of a flight."""

    SCHEDULED = "SCHEDULED"
    DELAYED = "DELAYED"
    DEPARTED = "DEPARTED"
    LANDED = "LANDED"
    CANCELLED = "CANCELLED"


class BookingStatus(str, Enum):
    """Status of a booking."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class LifecycleRecord:
    """A domain record whose status follows a time window.

    ``start_time``/``end_time`` carry whatever window the record type
    uses: tour start and end dates, flight departure and arrival, or a
    booking's creation time and payment deadline.
    """

    id: Any
    status: str
    start_time: datetime
    end_time: datetime
    name: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def label(self) -> str:
        """Human-readable identifier for log messages."""
        return self.name if self.name else str(self.id)

    def with_fields(self, **fields: Any) -> "LifecycleRecord":
        """Return a copy with the given fields replaced."""
        return replace(self, **fields)


@dataclass(frozen=True)
class RecordFilter:
    """Declarative candidate filter passed to record stores.

    Stores backed by a query language translate ``statuses`` into their
    own predicate; in-memory stores can simply call the filter.
    """

    statuses: frozenset[str]

    @classmethod
    def for_statuses(cls, statuses: Iterable[str]) -> "RecordFilter":
        return cls(statuses=frozenset(status_value(s) for s in statuses))

    def __call__(self, record: LifecycleRecord) -> bool:
        return status_value(record.status) in self.statuses


@dataclass(frozen=True)
class FollowUpWrite:
    """A counter adjustment on a related record.

    Produced by a policy when a status change has side effects elsewhere,
    such as a cancelled booking releasing its tour places and flight seats.
    """

    resource: str
    record_id: Any
    field: str
    delta: int


@dataclass
class ReconciliationResult:
    """Outcome of one reconciliation run."""

    updated: int = 0
    failed: int = 0
    unchanged: int = 0
    invalidated: int = 0
    invalidation_error: Exception | None = None

    @property
    def total(self) -> int:
        """Number of candidate records examined."""
        return self.updated + self.failed + self.unchanged

    def as_dict(self) -> dict[str, int]:
        """Counts reported to the job trigger."""
        return {
            "updatedCount": self.updated,
            "failureCount": self.failed,
            "unchangedCount": self.unchanged,
        }


def status_value(status: Any) -> str:
    return status.value if isinstance(status, Enum) else str(status)
