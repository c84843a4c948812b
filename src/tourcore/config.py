"""Process settings loaded from the environment."""

import logging
import os
from dataclasses import dataclass
from datetime import timedelta

from tourcore.core.entities.cache_config import CacheConfig


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


@dataclass
class Settings:
    """Runtime settings for the cache and the status jobs.

    Intervals are in seconds. The defaults check booking deadlines every
    5 minutes, flight statuses every 15 and tour statuses every 30.
    """

    redis_url: str = "redis://localhost:6379"
    cache_prefix: str = "tourcore"
    cache_ttl: int = 3600
    redis_timeout: float = 2.0
    job_concurrency: int = 10
    job_timeout: float | None = None
    booking_deadline_interval: float = 5 * 60
    flight_status_interval: float = 15 * 60
    tour_status_interval: float = 30 * 60

    def __post_init__(self) -> None:
        if self.cache_ttl <= 0:
            raise ValueError("cache_ttl must be positive")
        if self.job_concurrency < 1:
            raise ValueError("job_concurrency must be at least 1")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``REDIS_URL`` and ``TOURCORE_*`` variables."""
        job_timeout = _env_float("TOURCORE_JOB_TIMEOUT", 0.0)
        return cls(
            redis_url=os.getenv("REDIS_URL", cls.redis_url),
            cache_prefix=os.getenv("TOURCORE_CACHE_PREFIX", cls.cache_prefix),
            cache_ttl=_env_int("TOURCORE_CACHE_TTL", cls.cache_ttl),
            redis_timeout=_env_float("TOURCORE_REDIS_TIMEOUT", cls.redis_timeout),
            job_concurrency=_env_int("TOURCORE_JOB_CONCURRENCY", cls.job_concurrency),
            job_timeout=job_timeout or None,
            booking_deadline_interval=_env_float(
                "TOURCORE_BOOKING_DEADLINE_INTERVAL", cls.booking_deadline_interval
            ),
            flight_status_interval=_env_float(
                "TOURCORE_FLIGHT_STATUS_INTERVAL", cls.flight_status_interval
            ),
            tour_status_interval=_env_float(
                "TOURCORE_TOUR_STATUS_INTERVAL", cls.tour_status_interval
            ),
        )

    def cache_config(self) -> CacheConfig:
        """Cache configuration derived from these settings."""
        return CacheConfig(
            key_prefix=self.cache_prefix,
            default_ttl=timedelta(seconds=self.cache_ttl),
        )


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure root logging for entry points (the library never does this)."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
