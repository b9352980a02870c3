"""Persistent contract records and host-level call results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ticketseal.crypto.primitives import public_key_strkey


@dataclass
class ContractConfig:
    """Singleton contract configuration, written at instantiation."""

    owner: str  # Stellar address
    issuers: list[str] = field(default_factory=list)
    next_batch_id: int = 1

    def is_authorized(self, caller: str) -> bool:
        return caller == self.owner or caller in self.issuers


@dataclass
class EventBatch:
    """A set of tickets for one event, bound to one issuer keypair.

    ``issuer_public_key`` is immutable after creation and ``issued_count``
    never exceeds ``capacity``. Batches are never deleted.
    """

    batch_id: int
    issuer: str  # address that created the batch
    issuer_public_key: bytes  # raw ed25519, 32 bytes
    capacity: int
    issued_count: int = 0
    created_at: int = 0  # block time, unix seconds

    @property
    def tickets_left(self) -> int:
        return self.capacity - self.issued_count

    @property
    def sold_out(self) -> bool:
        return self.issued_count >= self.capacity

    @property
    def public_key_address(self) -> str:
        return public_key_strkey(self.issuer_public_key)


@dataclass
class CallResult:
    """Outcome of one host call. Failed calls commit nothing."""

    success: bool
    response: Any = None
    error_code: int | None = None
    error: str | None = None
    retryable: bool = False
    block_height: int = 0
