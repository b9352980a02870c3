"""Binary request/response boundary."""

from __future__ import annotations

import pytest

from ticketseal import wire
from ticketseal.errors import AlreadyRedeemed, ErrorCode, InvalidMessage, TicketNotFound
from ticketseal.models.messages import (
    IssueBatch,
    QueryTicketStatus,
    Redeem,
    RedeemResponse,
    TicketStatusResponse,
)
from ticketseal.models.ticket import RedemptionReceipt, TicketStatus

from tests.factories import ATTENDEE, ISSUER


def test_redeem_message_decodes_to_same_fields():
    msg = Redeem(batch_id=2**70, ticket_id=b"\x01" * 32, proof=b"\x02" * 64)
    assert wire.decode_execute(wire.encode(msg)) == msg


def test_encoding_is_deterministic():
    msg = QueryTicketStatus(batch_id=1, ticket_id=b"\x03" * 32)
    assert wire.encode(msg) == wire.encode(QueryTicketStatus(batch_id=1, ticket_id=b"\x03" * 32))


def test_optional_redeemed_at():
    valid = wire.decode(wire.encode(TicketStatusResponse(status=TicketStatus.VALID)))
    assert valid.redeemed_at is None
    receipt = RedemptionReceipt(batch_id=1, ticket_id=b"\x04" * 32, redeemed_at=123)
    assert wire.decode(wire.encode(RedeemResponse(receipt=receipt))).receipt == receipt


def test_query_is_not_accepted_as_execute():
    payload = wire.encode(QueryTicketStatus(batch_id=1, ticket_id=b"\x00" * 32))
    assert wire.is_query(payload)
    with pytest.raises(InvalidMessage, match="unexpected message kind"):
        wire.decode_execute(payload)


@pytest.mark.parametrize("payload", [b"", b"\x00\x01", b"garbage-bytes-here"])
def test_garbage_payload_is_invalid_message(payload):
    with pytest.raises(InvalidMessage):
        wire.decode(payload)


def test_capacity_must_fit_u32():
    with pytest.raises(InvalidMessage):
        wire.encode(IssueBatch(capacity=2**32))


def test_error_envelope_keeps_code():
    payload = wire.encode_error(AlreadyRedeemed("ticket was redeemed at 5"))
    with pytest.raises(AlreadyRedeemed) as exc_info:
        wire.decode(payload)
    assert exc_info.value.code == ErrorCode.AlreadyRedeemed
    assert "redeemed at 5" in exc_info.value.message


# ── Host byte boundary ────────────────────────────────────────────


async def test_host_handle_round_trip(host):
    issued = wire.decode(await host.handle(ISSUER, wire.encode(IssueBatch(capacity=1))))
    assert issued.batch_id == 1

    status_payload = wire.encode(QueryTicketStatus(batch_id=1, ticket_id=b"\x05" * 32))
    with pytest.raises(TicketNotFound):
        wire.decode(await host.handle(ATTENDEE, status_payload))


async def test_host_handle_rejects_garbage(host):
    response = await host.handle(ATTENDEE, b"\xff\xff")
    with pytest.raises(InvalidMessage):
        wire.decode(response)
