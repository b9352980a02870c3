"""Typed facade over the host key-value storage."""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from ticketseal.encoding import KEY_CONFIG, batch_key, issuer_batches_key, ticket_key
from ticketseal.errors import StorageReadError, StorageWriteError
from ticketseal.interfaces.storage import Storage
from ticketseal.models.records import ContractConfig, EventBatch
from ticketseal.models.ticket import TicketCredential
from ticketseal.state import codec

log = logging.getLogger(__name__)

T = TypeVar("T")


class StateStore:
    """Loads and saves contract records for the current call.

    Holds no cached copies; every read goes to the call's storage handle.
    """

    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    def _get(self, key: bytes) -> bytes | None:
        try:
            return self._storage.get(key)
        except Exception as exc:
            log.error("Storage read failed for key %r: %s", key[:24], exc)
            raise StorageReadError(f"storage read failed: {exc}") from exc

    def _set(self, key: bytes, value: bytes) -> None:
        try:
            self._storage.set(key, value)
        except Exception as exc:
            log.error("Storage write failed for key %r: %s", key[:24], exc)
            raise StorageWriteError(f"storage write failed: {exc}") from exc

    def _decode(self, what: str, decode: Callable[[bytes], T], data: bytes) -> T:
        try:
            return decode(data)
        except codec.CodecError as exc:
            log.error("Corrupted %s record: %s", what, exc)
            raise StorageReadError(f"corrupted {what} record: {exc}") from exc

    # ── Config ─────────────────────────────────────────

    def get_config(self) -> ContractConfig | None:
        data = self._get(KEY_CONFIG)
        return None if data is None else self._decode("config", codec.decode_config, data)

    def load_config(self) -> ContractConfig:
        config = self.get_config()
        if config is None:
            raise StorageReadError("contract not instantiated")
        return config

    def put_config(self, config: ContractConfig) -> None:
        self._set(KEY_CONFIG, codec.encode_config(config))

    # ── Batches ────────────────────────────────────────

    def get_batch(self, batch_id: int) -> EventBatch | None:
        data = self._get(batch_key(batch_id))
        return None if data is None else self._decode("batch", codec.decode_batch, data)

    def put_batch(self, batch: EventBatch) -> None:
        self._set(batch_key(batch.batch_id), codec.encode_batch(batch))

    # ── Tickets ────────────────────────────────────────

    def get_ticket(self, batch_id: int, ticket_id: bytes) -> TicketCredential | None:
        data = self._get(ticket_key(batch_id, ticket_id))
        return None if data is None else self._decode("ticket", codec.decode_ticket, data)

    def put_ticket(self, credential: TicketCredential) -> None:
        self._set(
            ticket_key(credential.batch_id, credential.ticket_id),
            codec.encode_ticket(credential),
        )

    # ── Issuer index ───────────────────────────────────

    def get_issuer_batches(self, issuer: str) -> list[int]:
        data = self._get(issuer_batches_key(issuer))
        return [] if data is None else self._decode("issuer index", codec.decode_batch_ids, data)

    def add_issuer_batch(self, issuer: str, batch_id: int) -> None:
        batch_ids = self.get_issuer_batches(issuer)
        batch_ids.append(batch_id)
        self._set(issuer_batches_key(issuer), codec.encode_batch_ids(batch_ids))
