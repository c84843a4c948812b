"""Key builder implementations."""

from tourcore.infrastructure.key_builders.default import ResourceKeyBuilder

__all__ = ["ResourceKeyBuilder"]
