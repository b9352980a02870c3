"""Per-call write overlay over committed state."""

from __future__ import annotations

from typing import Mapping


class TransactionalStorage:
    """Implements the Storage protocol for a single call.

    Reads see the call's own writes first, then committed state. Nothing
    reaches committed state unless the host commits ``writes``.
    """

    def __init__(self, committed: Mapping[bytes, bytes]) -> None:
        self._committed = committed
        self._writes: dict[bytes, bytes | None] = {}

    def get(self, key: bytes) -> bytes | None:
        if key in self._writes:
            return self._writes[key]
        return self._committed.get(key)

    def set(self, key: bytes, value: bytes) -> None:
        self._writes[bytes(key)] = bytes(value)

    def remove(self, key: bytes) -> None:
        self._writes[bytes(key)] = None

    @property
    def writes(self) -> dict[bytes, bytes | None]:
        return dict(self._writes)


class ReadOnlyStorage(TransactionalStorage):
    """Storage handle for queries; any write is a contract bug."""

    def set(self, key: bytes, value: bytes) -> None:
        raise PermissionError("queries cannot write to storage")

    def remove(self, key: bytes) -> None:
        raise PermissionError("queries cannot write to storage")
