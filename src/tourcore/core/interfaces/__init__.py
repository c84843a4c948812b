"""Core interfaces (Protocol classes) for tourcore."""

from tourcore.core.interfaces.cache_backend import ICacheBackend
from tourcore.core.interfaces.invalidator import IInvalidator
from tourcore.core.interfaces.key_builder import IKeyBuilder
from tourcore.core.interfaces.lifecycle_policy import ILifecyclePolicy
from tourcore.core.interfaces.record_store import IRecordStore
from tourcore.core.interfaces.serializer import ISerializer

__all__ = [
    "ICacheBackend",
    "IKeyBuilder",
    "ISerializer",
    "IInvalidator",
    "IRecordStore",
    "ILifecyclePolicy",
]
