"""Hashing utilities for cache key generation."""

import hashlib
import json
from typing import Any


def hash_value(value: Any) -> str:
    """Create a deterministic hash of a value.

    Args:
        value: Any JSON-serializable value.

    Returns:
        A hexadecimal hash string (first 16 chars of SHA-256).
    """
    if value is None:
        return "none"

    # Normalize to JSON with sorted keys for determinism
    normalized = json.dumps(value, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def drop_empty(params: dict[str, Any] | None) -> dict[str, Any]:
    """Remove None and empty-string values from query parameters.

    ``?page=1&q=`` and ``?page=1`` describe the same read, so they
    should produce the same key.
    """
    if not params:
        return {}
    return {k: v for k, v in params.items() if v is not None and v != ""}
