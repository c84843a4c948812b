"""Infrastructure layer implementations for tourcore."""

from tourcore.infrastructure.backends import InMemoryCacheBackend, RedisCacheBackend
from tourcore.infrastructure.key_builders import ResourceKeyBuilder
from tourcore.infrastructure.serializers import JsonSerializer
from tourcore.infrastructure.stores import InMemoryRecordStore

__all__ = [
    "InMemoryCacheBackend",
    "RedisCacheBackend",
    "InMemoryRecordStore",
    "ResourceKeyBuilder",
    "JsonSerializer",
]
