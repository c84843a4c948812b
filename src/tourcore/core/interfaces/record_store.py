"""Record store interface."""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from tourcore.core.entities.lifecycle import LifecycleRecord, RecordFilter


class IRecordStore(Protocol):
    """Contract for the authoritative store of lifecycle records.

    The schema and query language are owned by the implementation; the
    reconciliation job only needs these two capabilities.
    """

    async def find_many(self, record_filter: RecordFilter) -> Sequence[LifecycleRecord]:
        """Return every record accepted by the filter.

        Raises:
            RecordStoreError: If the records cannot be read.
        """
        ...

    async def update(self, record_id: Any, fields: Mapping[str, Any]) -> LifecycleRecord:
        """Apply a partial update to one record and return the new version.

        Raises:
            RecordNotFoundError: If no record has this id.
            RecordStoreError: On any other write failure.
        """
        ...

    async def increment(self, record_id: Any, field: str, amount: int) -> LifecycleRecord:
        """Atomically add ``amount`` to a numeric field of one record.

        Raises:
            RecordNotFoundError: If no record has this id.
            RecordStoreError: If the field is missing or not numeric.
        """
        ...
