"""Fixed-interval job scheduler.

Runs registered async jobs on a fixed cadence and reports each run to
completion/failure callbacks:

Example:
    scheduler = JobScheduler()
    scheduler.add_job(
        "tour-status",
        ReconciliationJob(store, TourStatusPolicy()),
        interval=30 * 60,
        on_complete=lambda job, result: print(result.as_dict()),
    )

    await scheduler.start()
    ...
    await scheduler.stop()
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from tourcore.config import Settings
from tourcore.core.interfaces.invalidator import IInvalidator
from tourcore.core.interfaces.record_store import IRecordStore
from tourcore.core.services.lifecycle_policies import (
    BookingDeadlinePolicy,
    FlightStatusPolicy,
    TourStatusPolicy,
)
from tourcore.core.services.reconciliation import ReconciliationJob
from tourcore.infrastructure.key_builders.default import ResourceKeyBuilder

logger = logging.getLogger(__name__)

JobFunc = Callable[[], Awaitable[Any]]
CompleteCallback = Callable[["ScheduledJob", Any], Any]
FailureCallback = Callable[["ScheduledJob", Exception], Any]


@dataclass
class ScheduledJob:
    """A scheduled job definition and its run history."""

    name: str
    func: JobFunc
    interval: float
    timeout: float | None = None
    on_complete: CompleteCallback | None = None
    on_failure: FailureCallback | None = None
    enabled: bool = True
    run_count: int = 0
    failure_count: int = 0
    last_run: datetime | None = None
    last_result: Any = None
    last_error: Exception | None = field(default=None, repr=False)


class JobScheduler:
    """Runs each job on its own fixed interval.

    A job never overlaps itself: the next run starts ``interval`` seconds
    after the previous one finished. A run that raises (or exceeds its
    timeout) is reported to ``on_failure`` and the job keeps its schedule.
    """

    def __init__(self) -> None:
        self._jobs: dict[str, ScheduledJob] = {}
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._running = False

    @property
    def jobs(self) -> dict[str, ScheduledJob]:
        return dict(self._jobs)

    @property
    def running(self) -> bool:
        return self._running

    def add_job(
        self,
        name: str,
        func: JobFunc,
        interval: float,
        timeout: float | None = None,
        on_complete: CompleteCallback | None = None,
        on_failure: FailureCallback | None = None,
        enabled: bool = True,
    ) -> ScheduledJob:
        """Add a scheduled job.

        Args:
            name: Unique job name.
            func: Async callable performing one run.
            interval: Seconds between the end of one run and the next.
            timeout: Optional time box for a single run.
            on_complete: Called with (job, result) after a successful run.
            on_failure: Called with (job, error) after a failed run.
            enabled: Whether the job is active.

        Returns:
            ScheduledJob instance
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        if name in self._jobs:
            raise ValueError(f"Job already scheduled: {name}")

        job = ScheduledJob(
            name=name,
            func=func,
            interval=interval,
            timeout=timeout,
            on_complete=on_complete,
            on_failure=on_failure,
            enabled=enabled,
        )
        self._jobs[name] = job
        logger.info(f"Scheduled job added: {name} (every {interval:g}s)")

        if self._running and enabled:
            self._tasks[name] = asyncio.create_task(self._loop(job))
        return job

    def remove_job(self, name: str) -> None:
        """Remove a job, cancelling its loop if the scheduler is running."""
        self._jobs.pop(name, None)
        task = self._tasks.pop(name, None)
        if task is not None:
            task.cancel()

    async def run_once(self, name: str) -> Any:
        """Run a job immediately and report the outcome to its callbacks.

        Returns:
            The job result, or None if the run failed.
        """
        job = self._jobs[name]
        job.last_run = datetime.now(timezone.utc)
        job.run_count += 1

        try:
            if job.timeout is not None:
                result = await asyncio.wait_for(job.func(), job.timeout)
            else:
                result = await job.func()
        except Exception as e:
            job.failure_count += 1
            job.last_error = e
            logger.error(f"Job {name} failed: {e!r}")
            await _notify(job.on_failure, job, e)
            return None

        job.last_result = result
        job.last_error = None
        logger.info(f"Job {name} completed successfully")
        await _notify(job.on_complete, job, result)
        return result

    async def start(self) -> None:
        """Start a loop for every enabled job; the first run is immediate."""
        if self._running:
            return
        self._running = True
        for job in self._jobs.values():
            if job.enabled:
                self._tasks[job.name] = asyncio.create_task(self._loop(job))
        logger.info(f"Scheduler started with {len(self._tasks)} jobs")

    async def stop(self) -> None:
        """Cancel all job loops and wait for them to finish."""
        self._running = False
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("Scheduler stopped")

    async def _loop(self, job: ScheduledJob) -> None:
        while self._running and job.enabled:
            await self.run_once(job.name)
            await asyncio.sleep(job.interval)


async def _notify(callback: Callable[..., Any] | None, *args: Any) -> None:
    if callback is None:
        return
    try:
        outcome = callback(*args)
        if inspect.isawaitable(outcome):
            await outcome
    except Exception as e:
        logger.error(f"Job callback {getattr(callback, '__name__', callback)!r} failed: {e}")


def build_default_scheduler(
    settings: Settings,
    tours: IRecordStore | None = None,
    flights: IRecordStore | None = None,
    bookings: IRecordStore | None = None,
    invalidator: IInvalidator | None = None,
) -> JobScheduler:
    """Wire the tour, flight and booking status jobs for the given stores.

    Each job purges its resource's cached reads (``tour:*``, ``flight:*``,
    ``booking:*``) after a run that changed at least one record. The
    booking job also releases tour places and flight seats held by the
    bookings it cancels, so it purges those resources too.
    """
    scheduler = JobScheduler()
    keys = ResourceKeyBuilder()
    specs = (
        (bookings, BookingDeadlinePolicy(), "booking", settings.booking_deadline_interval),
        (flights, FlightStatusPolicy(), "flight", settings.flight_status_interval),
        (tours, TourStatusPolicy(), "tour", settings.tour_status_interval),
    )
    related = {
        resource: store
        for resource, store in (("tour", tours), ("flight", flights))
        if store is not None
    }
    for store, policy, resource, interval in specs:
        if store is None:
            continue
        patterns = keys.patterns(resource)
        if resource == "booking":
            for other in related:
                patterns += keys.patterns(other)
        job = ReconciliationJob(
            store,
            policy,
            concurrency=settings.job_concurrency,
            invalidator=invalidator,
            invalidation_patterns=patterns,
            related_stores=related,
        )
        scheduler.add_job(
            policy.name,
            job,
            interval=interval,
            timeout=settings.job_timeout,
            on_complete=_log_result,
        )
    return scheduler


def _log_result(job: ScheduledJob, result: Any) -> None:
    counts = result.as_dict() if hasattr(result, "as_dict") else result
    logger.info(f"Job {job.name} result: {counts}")
