"""Single-use redemption and read-only status lookups."""

from __future__ import annotations

import logging

from ticketseal.encoding import TICKET_ID_SIZE, fits_u128
from ticketseal.errors import AlreadyRedeemed, BatchNotFound, InvalidProof, TicketNotFound
from ticketseal.models.records import EventBatch
from ticketseal.models.ticket import RedemptionReceipt, TicketCredential, TicketStatus
from ticketseal.state.store import StateStore

log = logging.getLogger(__name__)


def load_batch(store: StateStore, batch_id: int) -> EventBatch:
    batch = store.get_batch(batch_id) if fits_u128(batch_id) else None
    if batch is None:
        raise BatchNotFound(f"batch {batch_id} does not exist")
    return batch


def _load(
    store: StateStore, batch_id: int, ticket_id: bytes
) -> tuple[EventBatch, TicketCredential]:
    batch = load_batch(store, batch_id)
    ticket = None
    if len(ticket_id) == TICKET_ID_SIZE:
        ticket = store.get_ticket(batch_id, ticket_id)
    if ticket is None:
        raise TicketNotFound(f"ticket {ticket_id.hex()[:12]}... not issued in batch {batch_id}")
    return batch, ticket


def redeem(
    store: StateStore,
    batch_id: int,
    ticket_id: bytes,
    proof: bytes,
    block_time: int,
) -> RedemptionReceipt:
    """Verify a presented credential and mark it consumed.

    Valid -> Redeemed happens at most once; a failed check leaves the
    stored ticket untouched.
    """
    batch, ticket = _load(store, batch_id, ticket_id)

    presented = TicketCredential(batch_id=batch_id, ticket_id=ticket.ticket_id, proof=proof)
    if not presented.verify_authenticity(batch.issuer_public_key):
        log.warning("Redeem rejected: invalid proof for ticket %s...", ticket.ticket_id_hex[:12])
        raise InvalidProof("proof does not verify against the batch issuer key")

    if ticket.status is not TicketStatus.VALID:
        log.warning(
            "Redeem rejected: ticket %s... already redeemed at %s",
            ticket.ticket_id_hex[:12], ticket.redeemed_at,
        )
        raise AlreadyRedeemed(f"ticket was redeemed at {ticket.redeemed_at}")

    ticket.status = TicketStatus.REDEEMED
    ticket.redeemed_at = block_time
    store.put_ticket(ticket)

    log.info("Ticket %s... redeemed in batch %d", ticket.ticket_id_hex[:12], batch_id)
    return RedemptionReceipt(batch_id=batch_id, ticket_id=ticket.ticket_id, redeemed_at=block_time)


def query_ticket_status(
    store: StateStore, batch_id: int, ticket_id: bytes
) -> TicketCredential:
    _, ticket = _load(store, batch_id, ticket_id)
    return ticket
