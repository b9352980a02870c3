"""Mock implementations of host-facing components."""

from __future__ import annotations

import hashlib
from typing import Mapping

from ticketseal.host.backends import MemoryBackend


class MockEntropy:
    """Implements EntropySource. Deterministic per seed, fresh per call."""

    def __init__(self, seed: bytes = b"ticketseal-tests", size: int = 32) -> None:
        self._seed = seed
        self._size = size
        self.calls = 0

    def entropy(self) -> bytes:
        self.calls += 1
        out = b""
        block = 0
        while len(out) < self._size:
            out += hashlib.sha256(
                self._seed + self.calls.to_bytes(8, "big") + block.to_bytes(4, "big")
            ).digest()
            block += 1
        return out[: self._size]


class FailingEntropy:
    """Implements EntropySource. The feed is down."""

    def __init__(self, error: str = "enclave unavailable") -> None:
        self._error = error

    def entropy(self) -> bytes:
        raise RuntimeError(self._error)


class DictStorage:
    """Implements Storage over a plain dict, recording every write."""

    def __init__(self, data: Mapping[bytes, bytes] | None = None) -> None:
        self.data: dict[bytes, bytes] = dict(data or {})
        self.writes: list[bytes] = []

    def get(self, key: bytes) -> bytes | None:
        return self.data.get(key)

    def set(self, key: bytes, value: bytes) -> None:
        self.writes.append(key)
        self.data[key] = value

    def remove(self, key: bytes) -> None:
        self.writes.append(key)
        self.data.pop(key, None)


class BrokenStorage(DictStorage):
    """Implements Storage. Reads and/or writes raise."""

    def __init__(self, fail_reads: bool = False, fail_writes: bool = True) -> None:
        super().__init__()
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    def get(self, key: bytes) -> bytes | None:
        if self.fail_reads:
            raise OSError("disk read error")
        return super().get(key)

    def set(self, key: bytes, value: bytes) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        super().set(key, value)


class FailingBackend(MemoryBackend):
    """Implements StorageBackend. Commits fail while ``fail`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.fail = False

    async def apply(self, writes) -> None:
        if self.fail:
            await self.rollback()
            raise OSError("database is locked")
        await super().apply(writes)
