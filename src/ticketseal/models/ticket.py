"""Ticket credential model and its authenticity check."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from stellar_sdk import Keypair

from ticketseal.crypto import primitives
from ticketseal.encoding import credential_message, ticket_id_preimage


class TicketStatus(str, Enum):
    VALID = "valid"
    REDEEMED = "redeemed"


@dataclass
class TicketCredential:
    """A ticket: public identifier, issuer proof, redemption status.

    The proof is an ed25519 signature over ``credential_message(batch_id,
    ticket_id)``; nothing about the holder is stored.
    """

    batch_id: int
    ticket_id: bytes  # 32 bytes, SHA-256 of batch_id || nonce
    proof: bytes  # 64-byte signature
    status: TicketStatus = TicketStatus.VALID
    redeemed_at: int | None = None

    @classmethod
    def new(
        cls, batch_id: int, nonce: bytes, issuer_private_key: str | Keypair
    ) -> TicketCredential:
        ticket_id = primitives.digest(ticket_id_preimage(batch_id, nonce))
        proof = primitives.sign(
            issuer_private_key, credential_message(batch_id, ticket_id)
        )
        return cls(batch_id=batch_id, ticket_id=ticket_id, proof=proof)

    @property
    def message(self) -> bytes:
        return credential_message(self.batch_id, self.ticket_id)

    @property
    def ticket_id_hex(self) -> str:
        return self.ticket_id.hex()

    @property
    def is_redeemed(self) -> bool:
        return self.status is TicketStatus.REDEEMED

    def verify_authenticity(self, issuer_public_key: bytes | str) -> bool:
        return primitives.verify(issuer_public_key, self.message, self.proof)


@dataclass(frozen=True)
class RedemptionReceipt:
    """Returned once, when a ticket transitions Valid -> Redeemed."""

    batch_id: int
    ticket_id: bytes
    redeemed_at: int  # block time, unix seconds
