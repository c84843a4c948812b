"""Periodic status reconciliation for lifecycle records."""

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone

from tourcore.core.entities.lifecycle import (
    LifecycleRecord,
    ReconciliationResult,
    RecordFilter,
    status_value,
)
from tourcore.core.interfaces.invalidator import IInvalidator
from tourcore.core.interfaces.lifecycle_policy import ILifecyclePolicy
from tourcore.core.interfaces.record_store import IRecordStore
from tourcore.exceptions import CandidateFetchError, InvalidationError, RecordStoreError

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 10


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReconciliationJob:
    """Brings record statuses in line with the clock.

    One run loads every record whose status is one of the policy's
    candidate statuses, asks the policy for the desired status and writes
    only the records that differ. At most ``concurrency`` updates are in
    flight at once.

    A failed update is logged and counted without stopping the run; only
    a failure to load the candidates raises (CandidateFetchError). Each
    update is independent, so a run cut short (e.g. by a timeout) leaves
    the store valid and the next run picks up the remainder.

    Records outside the candidate statuses are never examined: a record
    set back from COMPLETED to UPCOMING by another actor is not revisited
    by status alone.

    When the policy asks for follow-up writes (a cancelled booking
    releasing its tour places, for instance) they are applied right after
    the status update as part of the same per-record unit. A failed
    follow-up counts the record as failed.
    """

    def __init__(
        self,
        store: IRecordStore,
        policy: ILifecyclePolicy,
        concurrency: int = DEFAULT_CONCURRENCY,
        invalidator: IInvalidator | None = None,
        invalidation_patterns: Iterable[str] = (),
        clock: Callable[[], datetime] = utc_now,
        name: str | None = None,
        related_stores: Mapping[str, IRecordStore] | None = None,
    ) -> None:
        """Initialize the job.

        Args:
            store: Record store holding the records to reconcile.
            policy: Status policy for this record type.
            concurrency: Maximum simultaneous updates.
            invalidator: Purges cached reads after a run that wrote records.
            invalidation_patterns: Patterns to purge after such a run.
            clock: Source of the current time when ``run`` gets none.
            name: Name used in log messages; defaults to the policy name.
            related_stores: Stores for the policy's follow-up writes, keyed by
                resource name.
        """
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self._store = store
        self._policy = policy
        self._concurrency = concurrency
        self._invalidator = invalidator
        self._patterns = list(invalidation_patterns)
        self._clock = clock
        self.name = name or policy.name
        self._related_stores = dict(related_stores or {})

    @property
    def concurrency(self) -> int:
        return self._concurrency

    async def run(self, now: datetime | None = None) -> ReconciliationResult:
        """Run one reconciliation pass.

        Args:
            now: Time to reconcile against; defaults to the job clock.

        Returns:
            Counts of updated, failed and unchanged records.

        Raises:
            CandidateFetchError: If the candidate records cannot be loaded.
        """
        now = now or self._clock()
        logger.info(f"[{self.name}] Checking record statuses at {now.isoformat()}")

        record_filter = RecordFilter.for_statuses(self._policy.candidate_statuses)
        try:
            records = await self._store.find_many(record_filter)
        except Exception as e:
            logger.error(f"[{self.name}] Failed to load candidate records: {e}")
            raise CandidateFetchError(
                f"[{self.name}] Failed to load candidate records: {e}"
            ) from e

        result = ReconciliationResult()
        if not records:
            logger.info(f"[{self.name}] No records to update")
            return result

        logger.info(f"[{self.name}] Found {len(records)} records to check")

        semaphore = asyncio.Semaphore(self._concurrency)

        async def reconcile(record: LifecycleRecord) -> None:
            async with semaphore:
                await self._reconcile_one(record, now, result)

        await asyncio.gather(*(reconcile(record) for record in records))

        if result.updated and self._invalidator is not None and self._patterns:
            try:
                result.invalidated = await self._invalidator.invalidate(self._patterns)
            except InvalidationError as e:
                result.invalidation_error = e
                logger.warning(f"[{self.name}] Cache invalidation after run failed: {e}")

        logger.info(
            f"[{self.name}] Status update completed. Updated: {result.updated}, "
            f"Failures: {result.failed}, Unchanged: {result.unchanged}"
        )
        return result

    async def __call__(self) -> ReconciliationResult:
        return await self.run()

    async def _reconcile_one(
        self,
        record: LifecycleRecord,
        now: datetime,
        result: ReconciliationResult,
    ) -> None:
        try:
            desired = self._policy.desired_status(record, now)
            if desired is None or desired == record.status:
                result.unchanged += 1
                return

            follow_ups = [
                (self._related_store(write.resource), write)
                for write in self._policy.follow_up_writes(record)
            ]

            await self._store.update(record.id, {"status": status_value(desired)})
            for store, write in follow_ups:
                await store.increment(write.record_id, write.field, write.delta)
        except Exception as e:
            result.failed += 1
            logger.error(f"[{self.name}] Failed to update {record.label}: {e}")
            return

        result.updated += 1
        logger.info(
            f"[{self.name}] Updated {record.label}: "
            f"{status_value(record.status)} -> {status_value(desired)}"
        )

    def _related_store(self, resource: str) -> IRecordStore:
        store = self._related_stores.get(resource)
        if store is None:
            raise RecordStoreError(f"No record store configured for {resource!r}")
        return store
