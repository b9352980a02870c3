"""Batch creation and ticket minting.

Plain synchronous functions: the host serializes calls, so the
check-then-increment on ``issued_count`` cannot race.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from stellar_sdk import Keypair

from ticketseal.crypto import primitives
from ticketseal.crypto.randomness import RandomnessSource
from ticketseal.encoding import NONCE_SIZE, U32_MAX, fits_u128
from ticketseal.errors import (
    BatchExhausted,
    BatchNotFound,
    CapacityInvalid,
    EntropyUnavailable,
    Unauthorized,
)
from ticketseal.models.records import EventBatch
from ticketseal.models.ticket import TicketCredential
from ticketseal.state.store import StateStore

log = logging.getLogger(__name__)

# Fresh nonces drawn before a colliding ticket id is treated as broken entropy.
_NONCE_ATTEMPTS = 3


@dataclass
class IssuedBatch:
    batch: EventBatch
    signing_key: Keypair  # handed to the caller once, never stored


def issue_batch(
    store: StateStore,
    randomness: RandomnessSource,
    caller: str,
    capacity: int,
    block_time: int = 0,
) -> IssuedBatch:
    """Create an event batch bound to a freshly generated issuer keypair."""
    config = store.load_config()
    if not config.is_authorized(caller):
        log.warning("issue_batch rejected: %s is not an authorized issuer", caller)
        raise Unauthorized(f"{caller} is not an authorized issuer")
    if capacity <= 0 or capacity > U32_MAX:
        raise CapacityInvalid(f"capacity must be in 1..{U32_MAX}, got {capacity}")

    signing_key, public_key = primitives.generate_keypair(randomness)

    batch = EventBatch(
        batch_id=config.next_batch_id,
        issuer=caller,
        issuer_public_key=public_key,
        capacity=capacity,
        issued_count=0,
        created_at=block_time,
    )
    config.next_batch_id += 1
    store.put_config(config)
    store.put_batch(batch)
    store.add_issuer_batch(caller, batch.batch_id)

    log.info(
        "Batch %d created by %s (capacity=%d, key=%s)",
        batch.batch_id, caller, capacity, signing_key.public_key,
    )
    return IssuedBatch(batch=batch, signing_key=signing_key)


def issue_ticket(
    store: StateStore,
    randomness: RandomnessSource,
    batch_id: int,
    issuer_secret: str | Keypair,
) -> TicketCredential:
    """Mint one ticket, signed with the issuer key supplied for this call."""
    batch = store.get_batch(batch_id) if fits_u128(batch_id) else None
    if batch is None:
        raise BatchNotFound(f"batch {batch_id} does not exist")
    if batch.issued_count >= batch.capacity:
        log.warning("issue_ticket rejected: batch %d is sold out", batch_id)
        raise BatchExhausted(f"batch {batch_id} has issued all {batch.capacity} tickets")

    signing_key = primitives.load_signing_key(issuer_secret)
    if signing_key.raw_public_key() != batch.issuer_public_key:
        log.warning("issue_ticket rejected: signing key does not match batch %d", batch_id)
        raise Unauthorized(f"signing key does not belong to batch {batch_id}")

    for _ in range(_NONCE_ATTEMPTS):
        nonce = randomness.next_bytes(NONCE_SIZE)
        credential = TicketCredential.new(batch_id, nonce, signing_key)
        if store.get_ticket(batch_id, credential.ticket_id) is None:
            break
        log.error("Ticket id collision in batch %d", batch_id)
    else:
        raise EntropyUnavailable("repeated ticket id collisions")

    batch.issued_count += 1
    store.put_batch(batch)
    store.put_ticket(credential)

    log.info(
        "Ticket %s... issued in batch %d (%d/%d)",
        credential.ticket_id_hex[:12], batch_id, batch.issued_count, batch.capacity,
    )
    return credential
