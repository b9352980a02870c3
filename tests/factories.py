"""Builders for contract state used across tests."""

from __future__ import annotations

from ticketseal.crypto.randomness import RandomnessSource
from ticketseal.engine import issuance
from ticketseal.models.records import ContractConfig
from ticketseal.models.ticket import TicketCredential
from ticketseal.state.store import StateStore

OWNER = "GDNAG4KFFVF5HCSGRWZIXZNL2SR2KBGJSHW2A6FI6DZI62XF6IBLO4GD"
ISSUER = "GBVOL67TMUQBGL4TZYNMY3ZQ5WGQYFPFD5VJRWXR72VA33VFNL225PL5"
ATTENDEE = "GCFXHS4GXL6BVUCXBWXGTITROWLVYXQKQLF4YH5O5JT3YZXCYPAFBJZB"

BLOCK_TIME = 1_700_000_000


def make_randomness(seed: bytes = b"factory", personalization: bytes = b"") -> RandomnessSource:
    return RandomnessSource(seed.ljust(32, b"\x00"), personalization)


def make_store(storage, owner: str = OWNER, issuers: list[str] | None = None) -> StateStore:
    """An instantiated StateStore over ``storage``."""
    store = StateStore(storage)
    store.put_config(ContractConfig(owner=owner, issuers=list(issuers or [ISSUER])))
    return store


def make_batch(
    store: StateStore,
    capacity: int = 2,
    caller: str = ISSUER,
    seed: bytes = b"batch",
) -> issuance.IssuedBatch:
    return issuance.issue_batch(store, make_randomness(seed), caller, capacity, BLOCK_TIME)


def make_ticket(
    store: StateStore, issued: issuance.IssuedBatch, seed: bytes = b"ticket"
) -> TicketCredential:
    return issuance.issue_ticket(
        store, make_randomness(seed), issued.batch.batch_id, issued.signing_key.secret,
    )


def flip_bit(data: bytes, index: int = 0, bit: int = 0) -> bytes:
    out = bytearray(data)
    out[index] ^= 1 << bit
    return bytes(out)
