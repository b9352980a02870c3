"""Fixed-width byte layouts shared by signing and storage.

Changing any layout here invalidates previously issued signatures or
orphans stored records, so each carries a version byte.
"""

from __future__ import annotations

U32_MAX = (1 << 32) - 1
U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1

TICKET_ID_SIZE = 32
NONCE_SIZE = 32

CREDENTIAL_TAG = b"TKT"
CREDENTIAL_VERSION = 1

STORAGE_VERSION = b"\x01"
KEY_CONFIG = STORAGE_VERSION + b"config"
PREFIX_BATCHES = STORAGE_VERSION + b"batch/"
PREFIX_TICKETS = STORAGE_VERSION + b"ticket/"
PREFIX_ISSUER_BATCHES = STORAGE_VERSION + b"issuer/"


def fits_u128(value: int) -> bool:
    return 0 <= value <= U128_MAX


def u128_bytes(value: int) -> bytes:
    if not fits_u128(value):
        raise ValueError(f"value {value} does not fit in u128")
    return value.to_bytes(16, "big")


def _check_ticket_id(ticket_id: bytes) -> bytes:
    if len(ticket_id) != TICKET_ID_SIZE:
        raise ValueError(f"ticket_id must be {TICKET_ID_SIZE} bytes, got {len(ticket_id)}")
    return bytes(ticket_id)


def credential_message(batch_id: int, ticket_id: bytes) -> bytes:
    """The exact bytes an issuer signs for ``(batch_id, ticket_id)``."""
    return (
        CREDENTIAL_TAG
        + bytes([CREDENTIAL_VERSION])
        + u128_bytes(batch_id)
        + _check_ticket_id(ticket_id)
    )


def ticket_id_preimage(batch_id: int, nonce: bytes) -> bytes:
    """Input hashed into a ticket id; binds the id to its batch."""
    if len(nonce) != NONCE_SIZE:
        raise ValueError(f"nonce must be {NONCE_SIZE} bytes, got {len(nonce)}")
    return u128_bytes(batch_id) + bytes(nonce)


# ── Storage keys ──────────────────────────────────────


def batch_key(batch_id: int) -> bytes:
    return PREFIX_BATCHES + u128_bytes(batch_id)


def ticket_key(batch_id: int, ticket_id: bytes) -> bytes:
    return PREFIX_TICKETS + u128_bytes(batch_id) + _check_ticket_id(ticket_id)


def issuer_batches_key(issuer: str) -> bytes:
    return PREFIX_ISSUER_BATCHES + issuer.encode("utf-8")
