"""Binary request/response payloads.

A message is the XDR of ``Vec[Symbol(kind), Struct(fields)]``. Integers are
fixed-width so payloads hash and verify identically on re-execution.
"""

from __future__ import annotations

import logging
from typing import Callable, Union

from stellar_sdk import scval, xdr

from ticketseal.encoding import U32_MAX, U128_MAX
from ticketseal.errors import ContractError, InvalidMessage, error_from_code
from ticketseal.models.messages import (
    AuthorizeIssuer,
    BatchIssuedResponse,
    BatchResponse,
    ExecuteMsg,
    Instantiate,
    InstantiateResponse,
    IssueBatch,
    IssuerBatchesResponse,
    IssuersResponse,
    IssueTicket,
    QueryBatch,
    QueryIssuerBatches,
    QueryMsg,
    QueryTicketStatus,
    Redeem,
    RedeemResponse,
    Response,
    RevokeIssuer,
    TicketIssuedResponse,
    TicketStatusResponse,
)
from ticketseal.models.ticket import RedemptionReceipt
from ticketseal.state.codec import (
    CodecError,
    from_optional_u64,
    from_status,
    from_text,
    from_xdr_bytes,
    read,
    struct_fields,
    to_optional_u64,
    to_xdr_bytes,
)

log = logging.getLogger(__name__)

ERROR_KIND = "error"

Message = Union[ExecuteMsg, QueryMsg, Response]

_text = scval.to_string


def _u32(value: int) -> xdr.SCVal:
    if not 0 <= value <= U32_MAX:
        raise InvalidMessage(f"value {value} does not fit in u32")
    return scval.to_uint32(value)


def _u128(value: int) -> xdr.SCVal:
    if not 0 <= value <= U128_MAX:
        raise InvalidMessage(f"value {value} does not fit in u128")
    return scval.to_uint128(value)


def _bytes(value: bytes) -> xdr.SCVal:
    return scval.to_bytes(bytes(value))


# ── Encoders: message -> (kind, fields) ────────────────

_ENCODERS: dict[type, Callable[[object], tuple[str, dict[str, xdr.SCVal]]]] = {
    Instantiate: lambda m: ("instantiate", {}),
    AuthorizeIssuer: lambda m: ("authorize_issuer", {"address": _text(m.address)}),
    RevokeIssuer: lambda m: ("revoke_issuer", {"address": _text(m.address)}),
    IssueBatch: lambda m: ("issue_batch", {
        "capacity": _u32(m.capacity), "entropy": _bytes(m.entropy),
    }),
    IssueTicket: lambda m: ("issue_ticket", {
        "batch_id": _u128(m.batch_id),
        "issuer_secret": _text(m.issuer_secret),
        "entropy": _bytes(m.entropy),
    }),
    Redeem: lambda m: ("redeem", {
        "batch_id": _u128(m.batch_id), "ticket_id": _bytes(m.ticket_id), "proof": _bytes(m.proof),
    }),
    QueryTicketStatus: lambda m: ("query_ticket_status", {
        "batch_id": _u128(m.batch_id), "ticket_id": _bytes(m.ticket_id),
    }),
    QueryBatch: lambda m: ("query_batch", {"batch_id": _u128(m.batch_id)}),
    QueryIssuerBatches: lambda m: ("query_issuer_batches", {"issuer": _text(m.issuer)}),
    InstantiateResponse: lambda m: ("instantiated", {"owner": _text(m.owner)}),
    IssuersResponse: lambda m: ("issuers", {
        "issuers": scval.to_vec([_text(i) for i in m.issuers]),
    }),
    BatchIssuedResponse: lambda m: ("batch_issued", {
        "batch_id": _u128(m.batch_id),
        "issuer_public_key": _text(m.issuer_public_key),
        "issuer_secret": _text(m.issuer_secret),
    }),
    TicketIssuedResponse: lambda m: ("ticket_issued", {
        "batch_id": _u128(m.batch_id), "ticket_id": _bytes(m.ticket_id), "proof": _bytes(m.proof),
    }),
    RedeemResponse: lambda m: ("redeemed", {
        "batch_id": _u128(m.receipt.batch_id),
        "ticket_id": _bytes(m.receipt.ticket_id),
        "redeemed_at": scval.to_uint64(m.receipt.redeemed_at),
    }),
    TicketStatusResponse: lambda m: ("ticket_status", {
        "status": scval.to_symbol(m.status.value),
        "redeemed_at": to_optional_u64(m.redeemed_at),
    }),
    BatchResponse: lambda m: ("batch", {
        "batch_id": _u128(m.batch_id),
        "issuer": _text(m.issuer),
        "issuer_public_key": _text(m.issuer_public_key),
        "capacity": _u32(m.capacity),
        "issued_count": _u32(m.issued_count),
        "tickets_left": _u32(m.tickets_left),
        "sold_out": scval.to_bool(m.sold_out),
    }),
    IssuerBatchesResponse: lambda m: ("issuer_batches", {
        "batch_ids": scval.to_vec([_u128(b) for b in m.batch_ids]),
    }),
}


# ── Decoders: fields -> message ────────────────────────

def _batch_ids(value: xdr.SCVal) -> list[int]:
    return [scval.from_uint128(v) for v in scval.from_vec(value)]


def _texts(value: xdr.SCVal) -> list[str]:
    return [from_text(v) for v in scval.from_vec(value)]


_DECODERS: dict[str, Callable[[dict[str, xdr.SCVal]], Message]] = {
    "instantiate": lambda f: Instantiate(),
    "authorize_issuer": lambda f: AuthorizeIssuer(address=read(f, "address", from_text)),
    "revoke_issuer": lambda f: RevokeIssuer(address=read(f, "address", from_text)),
    "issue_batch": lambda f: IssueBatch(
        capacity=read(f, "capacity", scval.from_uint32),
        entropy=read(f, "entropy", scval.from_bytes),
    ),
    "issue_ticket": lambda f: IssueTicket(
        batch_id=read(f, "batch_id", scval.from_uint128),
        issuer_secret=read(f, "issuer_secret", from_text),
        entropy=read(f, "entropy", scval.from_bytes),
    ),
    "redeem": lambda f: Redeem(
        batch_id=read(f, "batch_id", scval.from_uint128),
        ticket_id=read(f, "ticket_id", scval.from_bytes),
        proof=read(f, "proof", scval.from_bytes),
    ),
    "query_ticket_status": lambda f: QueryTicketStatus(
        batch_id=read(f, "batch_id", scval.from_uint128),
        ticket_id=read(f, "ticket_id", scval.from_bytes),
    ),
    "query_batch": lambda f: QueryBatch(batch_id=read(f, "batch_id", scval.from_uint128)),
    "query_issuer_batches": lambda f: QueryIssuerBatches(issuer=read(f, "issuer", from_text)),
    "instantiated": lambda f: InstantiateResponse(owner=read(f, "owner", from_text)),
    "issuers": lambda f: IssuersResponse(issuers=read(f, "issuers", _texts)),
    "batch_issued": lambda f: BatchIssuedResponse(
        batch_id=read(f, "batch_id", scval.from_uint128),
        issuer_public_key=read(f, "issuer_public_key", from_text),
        issuer_secret=read(f, "issuer_secret", from_text),
    ),
    "ticket_issued": lambda f: TicketIssuedResponse(
        batch_id=read(f, "batch_id", scval.from_uint128),
        ticket_id=read(f, "ticket_id", scval.from_bytes),
        proof=read(f, "proof", scval.from_bytes),
    ),
    "redeemed": lambda f: RedeemResponse(receipt=RedemptionReceipt(
        batch_id=read(f, "batch_id", scval.from_uint128),
        ticket_id=read(f, "ticket_id", scval.from_bytes),
        redeemed_at=read(f, "redeemed_at", scval.from_uint64),
    )),
    "ticket_status": lambda f: TicketStatusResponse(
        status=read(f, "status", from_status),
        redeemed_at=read(f, "redeemed_at", from_optional_u64),
    ),
    "batch": lambda f: BatchResponse(
        batch_id=read(f, "batch_id", scval.from_uint128),
        issuer=read(f, "issuer", from_text),
        issuer_public_key=read(f, "issuer_public_key", from_text),
        capacity=read(f, "capacity", scval.from_uint32),
        issued_count=read(f, "issued_count", scval.from_uint32),
        tickets_left=read(f, "tickets_left", scval.from_uint32),
        sold_out=read(f, "sold_out", scval.from_bool),
    ),
    "issuer_batches": lambda f: IssuerBatchesResponse(batch_ids=read(f, "batch_ids", _batch_ids)),
}

EXECUTE_KINDS = frozenset({
    "instantiate", "authorize_issuer", "revoke_issuer", "issue_batch", "issue_ticket", "redeem",
})
QUERY_KINDS = frozenset({"query_ticket_status", "query_batch", "query_issuer_batches"})


# ── Public API ─────────────────────────────────────────


def encode(message: Message) -> bytes:
    encoder = _ENCODERS.get(type(message))
    if encoder is None:
        raise InvalidMessage(f"cannot encode {type(message).__name__}")
    kind, fields = encoder(message)
    return to_xdr_bytes(scval.to_vec([scval.to_symbol(kind), scval.to_struct(fields)]))


def _split(payload: bytes) -> tuple[str, xdr.SCVal]:
    try:
        parts = scval.from_vec(from_xdr_bytes(payload))
        if len(parts) != 2:
            raise CodecError(f"expected [kind, fields], got {len(parts)} items")
        return scval.from_symbol(parts[0]), parts[1]
    except CodecError as exc:
        raise InvalidMessage(str(exc)) from exc
    except Exception as exc:
        raise InvalidMessage(f"malformed envelope: {exc}") from exc


def decode(payload: bytes, allowed: frozenset[str] | None = None) -> Message:
    """Decode a payload, raising ``InvalidMessage`` for anything malformed.

    Error envelopes are re-raised as their typed ``ContractError``.
    """
    kind, body = _split(payload)
    if kind == ERROR_KIND:
        raise decode_error(body)
    decoder = _DECODERS.get(kind)
    if decoder is None or (allowed is not None and kind not in allowed):
        raise InvalidMessage(f"unexpected message kind {kind!r}")
    try:
        return decoder(struct_fields(body))
    except CodecError as exc:
        raise InvalidMessage(f"{kind}: {exc}") from exc


def decode_execute(payload: bytes) -> ExecuteMsg:
    return decode(payload, EXECUTE_KINDS)  # type: ignore[return-value]


def decode_query(payload: bytes) -> QueryMsg:
    return decode(payload, QUERY_KINDS)  # type: ignore[return-value]


def is_query(payload: bytes) -> bool:
    kind, _ = _split(payload)
    return kind in QUERY_KINDS


def encode_error(error: ContractError) -> bytes:
    return to_xdr_bytes(scval.to_vec([
        scval.to_symbol(ERROR_KIND),
        scval.to_struct({
            "code": scval.to_uint32(int(error.code)),
            "message": _text(error.message),
            "retryable": scval.to_bool(error.retryable),
        }),
    ]))


def decode_error(body: xdr.SCVal) -> ContractError:
    try:
        fields = struct_fields(body, "code", "message")
        return error_from_code(
            read(fields, "code", scval.from_uint32),
            read(fields, "message", from_text),
        )
    except CodecError as exc:
        log.debug("Malformed error envelope: %s", exc)
        return InvalidMessage(f"malformed error envelope: {exc}")
