"""Signing primitives and per-call randomness."""

from __future__ import annotations

import pytest
from stellar_sdk import Keypair

from ticketseal.crypto import primitives
from ticketseal.crypto.randomness import MIN_ENTROPY_BYTES, RandomnessSource
from ticketseal.encoding import credential_message
from ticketseal.errors import EntropyUnavailable, KeyGenerationFailure, SigningFailure

from tests.factories import flip_bit, make_randomness
from tests.mocks import FailingEntropy, MockEntropy

TICKET_ID = bytes(range(32))


# ── Key generation ────────────────────────────────────────────────


def test_generate_keypair_is_deterministic_for_same_randomness():
    kp1, pub1 = primitives.generate_keypair(make_randomness(b"seed"))
    kp2, pub2 = primitives.generate_keypair(make_randomness(b"seed"))
    assert pub1 == pub2
    assert kp1.secret == kp2.secret
    assert len(pub1) == primitives.PUBLIC_KEY_SIZE


def test_generate_keypair_differs_per_seed():
    _, pub1 = primitives.generate_keypair(make_randomness(b"a"))
    _, pub2 = primitives.generate_keypair(make_randomness(b"b"))
    assert pub1 != pub2


def test_generate_keypair_rejects_bad_key_size():
    with pytest.raises(KeyGenerationFailure):
        primitives.generate_keypair(make_randomness(), seed_size=16)


def test_generate_keypair_fails_when_randomness_exhausted():
    randomness = RandomnessSource(b"\x01" * 32, limit=8)
    with pytest.raises(KeyGenerationFailure, match="exhausted"):
        primitives.generate_keypair(randomness)


# ── Sign / verify ─────────────────────────────────────────────────


def test_sign_verify_round_trip():
    keypair, public_key = primitives.generate_keypair(make_randomness())
    message = credential_message(7, TICKET_ID)
    signature = primitives.sign(keypair.secret, message)
    assert len(signature) == primitives.SIGNATURE_SIZE
    assert primitives.verify(public_key, message, signature)
    assert primitives.verify(keypair.public_key, message, signature)


def test_verify_fails_under_other_key():
    keypair, _ = primitives.generate_keypair(make_randomness(b"issuer"))
    _, other_public = primitives.generate_keypair(make_randomness(b"other"))
    message = credential_message(7, TICKET_ID)
    signature = primitives.sign(keypair, message)
    assert not primitives.verify(other_public, message, signature)


def test_verify_fails_for_different_message():
    keypair, public_key = primitives.generate_keypair(make_randomness())
    signature = primitives.sign(keypair, credential_message(7, TICKET_ID))
    assert not primitives.verify(public_key, credential_message(8, TICKET_ID), signature)


@pytest.mark.parametrize("public_key,signature", [
    (b"\x00" * 31, b"\x00" * 64),
    ("GNOTAKEY", b"\x00" * 64),
    (b"\x01" * 32, b"short"),
    (b"\x01" * 32, "not-bytes"),
])
def test_verify_returns_false_on_malformed_input(public_key, signature):
    assert primitives.verify(public_key, b"message", signature) is False


def test_verify_returns_false_on_flipped_signature_bit():
    keypair, public_key = primitives.generate_keypair(make_randomness())
    message = credential_message(1, TICKET_ID)
    signature = primitives.sign(keypair, message)
    assert not primitives.verify(public_key, message, flip_bit(signature, 10, 3))


def test_sign_rejects_malformed_secret():
    with pytest.raises(SigningFailure):
        primitives.sign("SNOTASECRET", b"message")


def test_sign_rejects_public_only_keypair():
    keypair, _ = primitives.generate_keypair(make_randomness())
    public_only = Keypair.from_public_key(keypair.public_key)
    with pytest.raises(SigningFailure):
        primitives.sign(public_only, b"message")


def test_digest_is_sha256():
    assert primitives.digest(b"abc").hex() == (
        "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
    )


# ── Randomness ────────────────────────────────────────────────────


def test_randomness_rejects_short_host_entropy():
    with pytest.raises(EntropyUnavailable):
        RandomnessSource(b"\x00" * (MIN_ENTROPY_BYTES - 1))


def test_randomness_from_failing_host_feed():
    with pytest.raises(EntropyUnavailable, match="enclave unavailable"):
        RandomnessSource.from_host(FailingEntropy())


def test_randomness_streams_are_consistent_across_chunking():
    a = make_randomness(b"x")
    b = make_randomness(b"x")
    assert a.next_bytes(10) + a.next_bytes(50) == b.next_bytes(60)


def test_personalization_changes_stream():
    plain = make_randomness(b"x").next_bytes(32)
    mixed = make_randomness(b"x", personalization=b"caller").next_bytes(32)
    assert plain != mixed


def test_host_feed_is_read_per_source():
    feed = MockEntropy()
    first = RandomnessSource.from_host(feed).next_bytes(32)
    second = RandomnessSource.from_host(feed).next_bytes(32)
    assert feed.calls == 2
    assert first != second


def test_randomness_exhaustion():
    randomness = RandomnessSource(b"\x02" * 32, limit=40)
    randomness.next_bytes(32)
    assert randomness.remaining == 8
    with pytest.raises(EntropyUnavailable):
        randomness.next_bytes(9)
