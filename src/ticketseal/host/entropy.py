"""Host entropy feeds."""

from __future__ import annotations

import secrets

ENTROPY_BYTES = 32


class SystemEntropy:
    """OS CSPRNG, standing in for enclave hardware randomness."""

    def __init__(self, size: int = ENTROPY_BYTES) -> None:
        self._size = size

    def entropy(self) -> bytes:
        return secrets.token_bytes(self._size)
