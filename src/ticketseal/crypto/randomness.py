"""Per-call randomness derived from host entropy.

The host feed is read once per call and expanded with HMAC-SHA256 in
counter mode. Chain-visible values (height, time) are never mixed in.
"""

from __future__ import annotations

import hashlib
import hmac
import logging

from ticketseal.errors import EntropyUnavailable
from ticketseal.interfaces.entropy import EntropySource

log = logging.getLogger(__name__)

MIN_ENTROPY_BYTES = 32
MAX_BYTES_PER_CALL = 1 << 16

_DOMAIN = b"ticketseal/randomness/v1"


class RandomnessSource:
    """Cryptographically secure byte stream for a single contract call."""

    def __init__(
        self,
        entropy: bytes,
        personalization: bytes = b"",
        limit: int = MAX_BYTES_PER_CALL,
    ) -> None:
        if not isinstance(entropy, (bytes, bytearray)) or len(entropy) < MIN_ENTROPY_BYTES:
            raise EntropyUnavailable(
                f"host supplied {len(entropy or b'')} entropy bytes, "
                f"need {MIN_ENTROPY_BYTES}"
            )
        seed_material = (
            _DOMAIN
            + len(personalization).to_bytes(4, "big")
            + bytes(personalization)
            + bytes(entropy)
        )
        self._key = hashlib.sha256(seed_material).digest()
        self._counter = 0
        self._buffer = b""
        self._remaining = limit

    @classmethod
    def from_host(
        cls, source: EntropySource, personalization: bytes = b""
    ) -> RandomnessSource:
        """Seed from the host feed, mixing optional caller entropy."""
        try:
            raw = source.entropy()
        except Exception as exc:
            log.error("Host entropy feed failed: %s", exc)
            raise EntropyUnavailable(f"host entropy feed failed: {exc}") from exc
        return cls(raw, personalization)

    @property
    def remaining(self) -> int:
        return self._remaining

    def next_bytes(self, n: int) -> bytes:
        if n < 0:
            raise ValueError("n must be non-negative")
        if n > self._remaining:
            raise EntropyUnavailable(
                f"randomness exhausted: requested {n}, {self._remaining} left"
            )
        while len(self._buffer) < n:
            block = hmac.new(
                self._key, self._counter.to_bytes(8, "big"), hashlib.sha256
            ).digest()
            self._counter += 1
            self._buffer += block
        out, self._buffer = self._buffer[:n], self._buffer[n:]
        self._remaining -= n
        return out
