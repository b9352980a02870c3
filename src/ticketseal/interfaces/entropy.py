"""EntropySource protocol - the trusted-execution randomness feed."""

from __future__ import annotations

from typing import Protocol


class EntropySource(Protocol):
    """Supplies fresh, unpredictable bytes at contract-call time."""

    def entropy(self) -> bytes:
        """Return at least 32 bytes of hardware-grade randomness."""
        ...
