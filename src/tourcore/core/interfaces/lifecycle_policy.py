"""Lifecycle policy interface."""

from collections.abc import Collection, Sequence
from datetime import datetime
from typing import Protocol

from tourcore.core.entities.lifecycle import FollowUpWrite, LifecycleRecord


class ILifecyclePolicy(Protocol):
    """Contract for deriving a record's status from the clock."""

    name: str
    candidate_statuses: Collection[str]

    def desired_status(self, record: LifecycleRecord, now: datetime) -> str | None:
        """Compute the status the record should have at ``now``.

        Returns:
            The desired status, or None to leave the record as it is.
        """
        ...

    def follow_up_writes(self, record: LifecycleRecord) -> Sequence[FollowUpWrite]:
        """Adjustments to related records once ``record`` changes status.

        Applied in the same unit of work as the status update.
        """
        ...
