"""Ed25519 signing primitives on top of stellar_sdk.Keypair.

This is the only module that touches raw key material. Public keys travel as
raw 32-byte values; issuer secrets travel as Stellar secret seeds (``S...``).
"""

from __future__ import annotations

import hashlib
import logging

from stellar_sdk import Keypair
from stellar_sdk.exceptions import (
    BadSignatureError,
    Ed25519PublicKeyInvalidError,
    Ed25519SecretSeedInvalidError,
    MissingEd25519SecretSeedError,
)

from ticketseal.crypto.randomness import RandomnessSource
from ticketseal.errors import EntropyUnavailable, KeyGenerationFailure, SigningFailure

log = logging.getLogger(__name__)

SEED_SIZE = 32
PUBLIC_KEY_SIZE = 32
SIGNATURE_SIZE = 64
DIGEST_SIZE = 32


def generate_keypair(
    randomness: RandomnessSource, seed_size: int = SEED_SIZE
) -> tuple[Keypair, bytes]:
    """Derive an issuer keypair from the call's randomness.

    Deterministic for a given byte stream. Returns the signing keypair and
    the raw public key.
    """
    if seed_size != SEED_SIZE:
        raise KeyGenerationFailure(
            f"unsupported key size {seed_size}, ed25519 seeds are {SEED_SIZE} bytes"
        )
    try:
        seed = randomness.next_bytes(seed_size)
    except EntropyUnavailable as exc:
        raise KeyGenerationFailure(f"randomness exhausted: {exc.message}") from exc
    keypair = Keypair.from_raw_ed25519_seed(seed)
    return keypair, keypair.raw_public_key()


def load_signing_key(secret: str | Keypair) -> Keypair:
    """Parse an issuer secret seed into a keypair that can sign."""
    if isinstance(secret, Keypair):
        keypair = secret
    else:
        try:
            keypair = Keypair.from_secret(secret)
        except (Ed25519SecretSeedInvalidError, ValueError, TypeError) as exc:
            raise SigningFailure("malformed issuer secret") from exc
    if not keypair.can_sign():
        raise SigningFailure("key has no secret seed")
    return keypair


def sign(private_key: str | Keypair, message: bytes) -> bytes:
    keypair = load_signing_key(private_key)
    try:
        return keypair.sign(message)
    except MissingEd25519SecretSeedError as exc:
        raise SigningFailure("key has no secret seed") from exc


def verify(public_key: bytes | str, message: bytes, signature: bytes) -> bool:
    """Check an ed25519 signature. Malformed input yields False, never raises."""
    if not isinstance(signature, (bytes, bytearray)) or len(signature) != SIGNATURE_SIZE:
        return False
    try:
        if isinstance(public_key, str):
            keypair = Keypair.from_public_key(public_key)
        else:
            keypair = Keypair.from_raw_ed25519_public_key(bytes(public_key))
        keypair.verify(message, bytes(signature))
    except (BadSignatureError, Ed25519PublicKeyInvalidError, ValueError, TypeError):
        return False
    return True


def digest(data: bytes) -> bytes:
    """SHA-256 over ``data``."""
    return hashlib.sha256(data).digest()


def public_key_strkey(raw_public_key: bytes) -> str:
    """Render a raw public key as a Stellar ``G...`` address."""
    return Keypair.from_raw_ed25519_public_key(raw_public_key).public_key
