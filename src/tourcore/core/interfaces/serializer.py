"""Serializer interface."""

from typing import Any, Protocol


class ISerializer(Protocol):
    """Converts cached values to and from the opaque bytes a store keeps.

    ``deserialize(serialize(v))`` must give back a value equal to ``v`` for
    every value the application caches, including the datetimes and status
    enums carried by lifecycle records.

    Both directions report failure only through SerializationError.
    CacheAsideService relies on that: a value that cannot be encoded is
    returned to the caller uncached, and bytes that cannot be decoded are
    treated as a miss and overwritten by the next populate.
    """

    def serialize(self, value: Any) -> bytes:
        """Encode a value for storage.

        Raises:
            SerializationError: If the value has no stored representation.
        """
        ...

    def deserialize(self, data: bytes) -> Any:
        """Decode bytes previously produced by ``serialize``.

        Raises:
            SerializationError: If the bytes are corrupt or foreign.
        """
        ...
