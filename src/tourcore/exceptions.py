"""Exception hierarchy for tourcore."""


class TourCoreError(Exception):
    """Base class for all tourcore errors."""

    pass


class CacheTransportError(TourCoreError):
    """Raised when the cache service is unreachable or times out.

    This is distinct from a logical miss: a backend returns ``None``
    for an absent key and raises this error only when it could not
    talk to the underlying store.
    """

    pass


class SerializationError(TourCoreError):
    """Raised when serialization or deserialization fails."""

    pass


class InvalidationError(TourCoreError):
    """Raised when a pattern invalidation could not be completed.

    No partial-invalidation guarantee is made: callers must assume any
    key matching ``patterns`` may still be cached.
    """

    def __init__(self, message: str, patterns: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.patterns = patterns


class RecordStoreError(TourCoreError):
    """Raised by record stores on read or write failures."""

    pass


class RecordNotFoundError(RecordStoreError):
    """Raised when updating a record that does not exist."""

    def __init__(self, record_id: object) -> None:
        super().__init__(f"Record not found: {record_id!r}")
        self.record_id = record_id


class CandidateFetchError(TourCoreError):
    """Raised when a reconciliation run cannot load its candidate records."""

    pass
