"""In-memory record store implementation."""

import asyncio
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import fields as dataclass_fields
from typing import Any

from tourcore.core.entities.lifecycle import LifecycleRecord, RecordFilter
from tourcore.exceptions import RecordNotFoundError, RecordStoreError

logger = logging.getLogger(__name__)

_UPDATABLE = frozenset(f.name for f in dataclass_fields(LifecycleRecord)) - {"id"}


class InMemoryRecordStore:
    """Dictionary-backed record store.

    Suitable for tests and single-process tools. Each update replaces the
    stored record atomically, so a run interrupted between updates leaves
    every record in a valid state.
    """

    def __init__(self, records: Iterable[LifecycleRecord] = ()) -> None:
        self._records: dict[Any, LifecycleRecord] = {r.id: r for r in records}
        self._lock = asyncio.Lock()
        self.update_calls = 0

    async def find_many(self, record_filter: RecordFilter) -> Sequence[LifecycleRecord]:
        """Return every stored record accepted by the filter."""
        return [record for record in self._records.values() if record_filter(record)]

    async def update(self, record_id: Any, fields: Mapping[str, Any]) -> LifecycleRecord:
        """Apply a partial update to one record.

        Raises:
            RecordNotFoundError: If no record has this id.
            RecordStoreError: If a field name is not updatable.
        """
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise RecordStoreError(f"Cannot update fields: {sorted(unknown)}")

        async with self._lock:
            self.update_calls += 1
            current = self._records.get(record_id)
            if current is None:
                raise RecordNotFoundError(record_id)
            updated = current.with_fields(**fields)
            self._records[record_id] = updated

        logger.debug(f"Updated record {record_id}: {dict(fields)}")
        return updated

    async def increment(self, record_id: Any, field: str, amount: int) -> LifecycleRecord:
        """Add ``amount`` to a numeric counter held in the record's extra fields.

        Raises:
            RecordNotFoundError: If no record has this id.
            RecordStoreError: If the counter is missing or not numeric.
        """
        async with self._lock:
            self.update_calls += 1
            current = self._records.get(record_id)
            if current is None:
                raise RecordNotFoundError(record_id)
            value = current.extra.get(field)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise RecordStoreError(f"Record {record_id} has no numeric field {field!r}")
            updated = current.with_fields(extra={**current.extra, field: value + amount})
            self._records[record_id] = updated

        logger.debug(f"Incremented {field} of record {record_id} by {amount}")
        return updated

    async def add(self, record: LifecycleRecord) -> None:
        """Insert or replace a record."""
        async with self._lock:
            self._records[record.id] = record

    def get(self, record_id: Any) -> LifecycleRecord | None:
        """Return the stored record, or None."""
        return self._records.get(record_id)

    def __len__(self) -> int:
        return len(self._records)
