"""Ticket credential derivation and the signed byte layout."""

from __future__ import annotations

from ticketseal.crypto import primitives
from ticketseal.encoding import (
    CREDENTIAL_TAG,
    CREDENTIAL_VERSION,
    credential_message,
    ticket_id_preimage,
)
from ticketseal.models.ticket import TicketCredential, TicketStatus

from tests.factories import flip_bit, make_randomness

NONCE = b"\x11" * 32


def _issuer(seed: bytes = b"issuer"):
    return primitives.generate_keypair(make_randomness(seed))


def test_credential_message_layout_is_fixed_width():
    ticket_id = b"\xab" * 32
    message = credential_message(258, ticket_id)
    assert len(message) == len(CREDENTIAL_TAG) + 1 + 16 + 32
    assert message[:3] == CREDENTIAL_TAG
    assert message[3] == CREDENTIAL_VERSION
    assert message[4:20] == (258).to_bytes(16, "big")
    assert message[20:] == ticket_id


def test_new_credential_derives_ticket_id_from_batch_and_nonce():
    keypair, _ = _issuer()
    credential = TicketCredential.new(5, NONCE, keypair)
    assert credential.ticket_id == primitives.digest(ticket_id_preimage(5, NONCE))
    assert credential.status is TicketStatus.VALID
    assert credential.redeemed_at is None


def test_same_nonce_in_other_batch_gives_other_ticket_id():
    keypair, _ = _issuer()
    a = TicketCredential.new(1, NONCE, keypair)
    b = TicketCredential.new(2, NONCE, keypair)
    assert a.ticket_id != b.ticket_id


def test_proof_verifies_under_issuer_key_only():
    keypair, public_key = _issuer(b"issuer")
    _, other_key = _issuer(b"other")
    credential = TicketCredential.new(3, NONCE, keypair.secret)
    assert credential.verify_authenticity(public_key)
    assert credential.verify_authenticity(keypair.public_key)
    assert not credential.verify_authenticity(other_key)


def test_proof_is_bound_to_batch():
    keypair, public_key = _issuer()
    credential = TicketCredential.new(3, NONCE, keypair)
    moved = TicketCredential(batch_id=4, ticket_id=credential.ticket_id, proof=credential.proof)
    assert not moved.verify_authenticity(public_key)


def test_tampered_proof_fails():
    keypair, public_key = _issuer()
    credential = TicketCredential.new(3, NONCE, keypair)
    credential.proof = flip_bit(credential.proof, 0, 0)
    assert not credential.verify_authenticity(public_key)
