"""Cache backend implementations."""

from tourcore.infrastructure.backends.memory import InMemoryCacheBackend
from tourcore.infrastructure.backends.redis import RedisCacheBackend

__all__ = ["InMemoryCacheBackend", "RedisCacheBackend"]
