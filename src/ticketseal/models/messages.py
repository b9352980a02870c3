"""Request and response messages exchanged with callers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ticketseal.models.ticket import RedemptionReceipt, TicketStatus


# ── Execute messages ───────────────────────────────────


@dataclass(frozen=True)
class Instantiate:
    """Initialize contract state; the sender becomes owner."""


@dataclass(frozen=True)
class AuthorizeIssuer:
    address: str


@dataclass(frozen=True)
class RevokeIssuer:
    address: str


@dataclass(frozen=True)
class IssueBatch:
    capacity: int
    entropy: bytes = b""  # optional caller entropy, mixed with host entropy


@dataclass(frozen=True)
class IssueTicket:
    batch_id: int
    issuer_secret: str  # Stellar secret seed, used for this call only
    entropy: bytes = b""

    def __repr__(self) -> str:
        return f"IssueTicket(batch_id={self.batch_id}, issuer_secret='***')"


@dataclass(frozen=True)
class Redeem:
    batch_id: int
    ticket_id: bytes
    proof: bytes


ExecuteMsg = Union[Instantiate, AuthorizeIssuer, RevokeIssuer, IssueBatch, IssueTicket, Redeem]


# ── Query messages ─────────────────────────────────────


@dataclass(frozen=True)
class QueryTicketStatus:
    batch_id: int
    ticket_id: bytes


@dataclass(frozen=True)
class QueryBatch:
    batch_id: int


@dataclass(frozen=True)
class QueryIssuerBatches:
    issuer: str


QueryMsg = Union[QueryTicketStatus, QueryBatch, QueryIssuerBatches]


# ── Responses ──────────────────────────────────────────


@dataclass(frozen=True)
class InstantiateResponse:
    owner: str


@dataclass(frozen=True)
class IssuersResponse:
    issuers: list[str]


@dataclass(frozen=True)
class BatchIssuedResponse:
    """The issuer secret appears here once and is never persisted."""

    batch_id: int
    issuer_public_key: str  # G... address
    issuer_secret: str  # S... seed

    def __repr__(self) -> str:
        return (
            f"BatchIssuedResponse(batch_id={self.batch_id}, "
            f"issuer_public_key={self.issuer_public_key!r}, issuer_secret='***')"
        )


@dataclass(frozen=True)
class TicketIssuedResponse:
    batch_id: int
    ticket_id: bytes
    proof: bytes


@dataclass(frozen=True)
class RedeemResponse:
    receipt: RedemptionReceipt


@dataclass(frozen=True)
class TicketStatusResponse:
    status: TicketStatus
    redeemed_at: int | None = None


@dataclass(frozen=True)
class BatchResponse:
    batch_id: int
    issuer: str
    issuer_public_key: str
    capacity: int
    issued_count: int
    tickets_left: int
    sold_out: bool


@dataclass(frozen=True)
class IssuerBatchesResponse:
    batch_ids: list[int]


Response = Union[
    InstantiateResponse, IssuersResponse, BatchIssuedResponse,
    TicketIssuedResponse, RedeemResponse, TicketStatusResponse,
    BatchResponse, IssuerBatchesResponse,
]
