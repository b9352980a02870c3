"""Storage protocols - the host's key-value boundary."""

from __future__ import annotations

from typing import Mapping, Protocol


class Storage(Protocol):
    """Synchronous key-value view handed to the contract for one call."""

    def get(self, key: bytes) -> bytes | None:
        """Return the stored value, or None when the key is absent."""
        ...

    def set(self, key: bytes, value: bytes) -> None:
        ...

    def remove(self, key: bytes) -> None:
        ...


class StorageBackend(Protocol):
    """Durable committed state behind the host.

    A backend may be shared by several hosts (one per process). ``begin``
    must exclude every other writer until ``apply`` or ``rollback``.
    """

    async def load(self) -> dict[bytes, bytes]:
        """Return every committed key/value pair, as of now."""
        ...

    async def begin(self) -> dict[bytes, bytes]:
        """Take the exclusive write lock and return the current committed state."""
        ...

    async def apply(self, writes: Mapping[bytes, bytes | None]) -> None:
        """Write a call's write set and commit the open transaction.

        None values are deletions.
        """
        ...

    async def rollback(self) -> None:
        """Abandon the open transaction and release the write lock."""
        ...

    async def close(self) -> None:
        ...
