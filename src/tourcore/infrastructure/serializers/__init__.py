"""Serializer implementations."""

from tourcore.infrastructure.serializers.json import JsonSerializer

__all__ = ["JsonSerializer"]
