"""Cryptographic primitives and per-call randomness."""

from ticketseal.crypto.primitives import (
    digest,
    generate_keypair,
    load_signing_key,
    public_key_strkey,
    sign,
    verify,
)
from ticketseal.crypto.randomness import RandomnessSource

__all__ = [
    "RandomnessSource",
    "digest", "generate_keypair", "load_signing_key",
    "public_key_strkey", "sign", "verify",
]
