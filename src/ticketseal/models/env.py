"""Per-call context supplied by the host."""

from __future__ import annotations

from dataclasses import dataclass

from ticketseal.interfaces.entropy import EntropySource
from ticketseal.interfaces.storage import Storage


@dataclass(frozen=True)
class BlockInfo:
    height: int
    time: int  # unix seconds


@dataclass(frozen=True)
class Env:
    block: BlockInfo
    contract_address: str


@dataclass(frozen=True)
class MessageInfo:
    """Authenticated caller identity, as established by the host."""

    sender: str


@dataclass
class Deps:
    """Store handle and entropy feed bound to the current host transaction."""

    storage: Storage
    entropy: EntropySource
