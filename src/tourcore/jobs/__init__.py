"""Scheduled background jobs."""

from tourcore.jobs.scheduler import JobScheduler, ScheduledJob, build_default_scheduler

__all__ = ["JobScheduler", "ScheduledJob", "build_default_scheduler"]
