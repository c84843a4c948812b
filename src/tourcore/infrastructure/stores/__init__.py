"""Record store implementations."""

from tourcore.infrastructure.stores.memory import InMemoryRecordStore

__all__ = ["InMemoryRecordStore"]
