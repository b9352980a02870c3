"""XDR record codec for persisted contract state.

Records are Stellar ``SCVal`` structs: symbol-keyed maps with fixed-width
integers, so the stored bytes are deterministic across re-execution.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from stellar_sdk import scval, xdr

from ticketseal.models.records import ContractConfig, EventBatch
from ticketseal.models.ticket import TicketCredential, TicketStatus

T = TypeVar("T")


class CodecError(ValueError):
    """Raised when bytes do not decode to the expected record shape."""


# ── Shared helpers ─────────────────────────────────────


def to_xdr_bytes(value: xdr.SCVal) -> bytes:
    return value.to_xdr_bytes()


def from_xdr_bytes(data: bytes) -> xdr.SCVal:
    try:
        return xdr.SCVal.from_xdr_bytes(data)
    except Exception as exc:
        raise CodecError(f"undecodable XDR: {exc}") from exc


def struct_fields(value: xdr.SCVal, *required: str) -> dict[str, xdr.SCVal]:
    try:
        fields = scval.from_struct(value)
    except Exception as exc:
        raise CodecError(f"expected struct: {exc}") from exc
    missing = [name for name in required if name not in fields]
    if missing:
        raise CodecError(f"missing fields: {', '.join(missing)}")
    return fields


def read(fields: dict[str, xdr.SCVal], name: str, decode: Callable[[xdr.SCVal], T]) -> T:
    try:
        return decode(fields[name])
    except Exception as exc:
        raise CodecError(f"bad field {name!r}: {exc}") from exc


def to_optional_u64(value: int | None) -> xdr.SCVal:
    return scval.to_void() if value is None else scval.to_uint64(value)


def from_optional_u64(value: xdr.SCVal) -> int | None:
    if value.type == xdr.SCValType.SCV_VOID:
        return None
    return scval.from_uint64(value)


def from_text(value: xdr.SCVal) -> str:
    return scval.from_string(value).decode("utf-8")


def from_status(value: xdr.SCVal) -> TicketStatus:
    return TicketStatus(scval.from_symbol(value))


# ── Contract config ────────────────────────────────────


def encode_config(config: ContractConfig) -> bytes:
    return to_xdr_bytes(scval.to_struct({
        "owner": scval.to_string(config.owner),
        "issuers": scval.to_vec([scval.to_string(i) for i in config.issuers]),
        "next_batch_id": scval.to_uint128(config.next_batch_id),
    }))


def decode_config(data: bytes) -> ContractConfig:
    fields = struct_fields(from_xdr_bytes(data), "owner", "issuers", "next_batch_id")
    return ContractConfig(
        owner=read(fields, "owner", from_text),
        issuers=read(fields, "issuers", lambda v: [from_text(i) for i in scval.from_vec(v)]),
        next_batch_id=read(fields, "next_batch_id", scval.from_uint128),
    )


# ── Event batch ────────────────────────────────────────


def encode_batch(batch: EventBatch) -> bytes:
    return to_xdr_bytes(scval.to_struct({
        "batch_id": scval.to_uint128(batch.batch_id),
        "issuer": scval.to_string(batch.issuer),
        "issuer_public_key": scval.to_bytes(batch.issuer_public_key),
        "capacity": scval.to_uint32(batch.capacity),
        "issued_count": scval.to_uint32(batch.issued_count),
        "created_at": scval.to_uint64(batch.created_at),
    }))


def decode_batch(data: bytes) -> EventBatch:
    fields = struct_fields(
        from_xdr_bytes(data),
        "batch_id", "issuer", "issuer_public_key", "capacity", "issued_count", "created_at",
    )
    return EventBatch(
        batch_id=read(fields, "batch_id", scval.from_uint128),
        issuer=read(fields, "issuer", from_text),
        issuer_public_key=read(fields, "issuer_public_key", scval.from_bytes),
        capacity=read(fields, "capacity", scval.from_uint32),
        issued_count=read(fields, "issued_count", scval.from_uint32),
        created_at=read(fields, "created_at", scval.from_uint64),
    )


# ── Ticket credential ──────────────────────────────────


def encode_ticket(ticket: TicketCredential) -> bytes:
    return to_xdr_bytes(scval.to_struct({
        "batch_id": scval.to_uint128(ticket.batch_id),
        "ticket_id": scval.to_bytes(ticket.ticket_id),
        "proof": scval.to_bytes(ticket.proof),
        "status": scval.to_symbol(ticket.status.value),
        "redeemed_at": to_optional_u64(ticket.redeemed_at),
    }))


def decode_ticket(data: bytes) -> TicketCredential:
    fields = struct_fields(
        from_xdr_bytes(data), "batch_id", "ticket_id", "proof", "status", "redeemed_at",
    )
    return TicketCredential(
        batch_id=read(fields, "batch_id", scval.from_uint128),
        ticket_id=read(fields, "ticket_id", scval.from_bytes),
        proof=read(fields, "proof", scval.from_bytes),
        status=read(fields, "status", from_status),
        redeemed_at=read(fields, "redeemed_at", from_optional_u64),
    )


# ── Issuer index ───────────────────────────────────────


def encode_batch_ids(batch_ids: list[int]) -> bytes:
    return to_xdr_bytes(scval.to_vec([scval.to_uint128(b) for b in batch_ids]))


def decode_batch_ids(data: bytes) -> list[int]:
    value = from_xdr_bytes(data)
    try:
        return [scval.from_uint128(v) for v in scval.from_vec(value)]
    except Exception as exc:
        raise CodecError(f"expected vec of u128: {exc}") from exc
