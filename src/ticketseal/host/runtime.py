"""Local contract host - serializes calls and commits them all-or-nothing."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from ticketseal import contract, wire
from ticketseal.errors import ContractError, StorageReadError, StorageWriteError, error_from_code
from ticketseal.host.backends import SQLiteBackend
from ticketseal.host.entropy import SystemEntropy
from ticketseal.host.transaction import ReadOnlyStorage, TransactionalStorage
from ticketseal.interfaces.entropy import EntropySource
from ticketseal.interfaces.storage import StorageBackend
from ticketseal.models.env import BlockInfo, Deps, Env, MessageInfo
from ticketseal.models.messages import ExecuteMsg, Instantiate, QueryMsg
from ticketseal.models.records import CallResult

log = logging.getLogger(__name__)


class ContractHost:
    """Runs contract calls one at a time against committed state.

    Each execute call holds the backend write lock and gets a fresh write
    overlay over the state committed at that moment. The overlay is committed
    only when the call returns normally; any error rolls it back, so a failed
    call leaves no trace. Hosts in other processes sharing the backend are
    serialized by the backend lock.
    """

    def __init__(
        self,
        backend: StorageBackend,
        entropy: EntropySource | None = None,
        contract_address: str = "ticketseal",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._backend = backend
        self._entropy = entropy or SystemEntropy()
        self._contract_address = contract_address
        self._clock = clock
        self._lock = asyncio.Lock()
        self._height = 0
        self._started = False

    @property
    def block_height(self) -> int:
        return self._height

    async def start(self) -> None:
        """Check the backend is readable and mark the host ready."""
        state = await self._backend.load()
        self._started = True
        log.info(
            "Host started for %s (%d committed keys)",
            self._contract_address, len(state),
        )

    async def close(self) -> None:
        await self._backend.close()
        self._started = False

    def _env(self) -> Env:
        return Env(
            block=BlockInfo(height=self._height, time=int(self._clock())),
            contract_address=self._contract_address,
        )

    @staticmethod
    def _failure(exc: ContractError, height: int) -> CallResult:
        return CallResult(
            success=False,
            error_code=int(exc.code),
            error=exc.message,
            retryable=exc.retryable,
            block_height=height,
        )

    # ── Calls ──────────────────────────────────────────

    async def instantiate(self, owner: str) -> CallResult:
        return await self.execute(owner, Instantiate())

    async def execute(self, sender: str, msg: ExecuteMsg) -> CallResult:
        assert self._started, "Host not started. Call start() first."
        async with self._lock:
            self._height += 1
            height = self._height
            try:
                committed = await self._backend.begin()
            except Exception as exc:
                log.error("Call %d could not start a transaction: %s", height, exc)
                return self._failure(StorageWriteError(f"storage busy: {exc}"), height)

            tx = TransactionalStorage(committed)
            deps = Deps(storage=tx, entropy=self._entropy)
            try:
                response = contract.execute(deps, self._env(), MessageInfo(sender=sender), msg)
            except ContractError as exc:
                await self._backend.rollback()
                log.warning(
                    "Call %d (%s from %s) failed: %s [%s]",
                    height, type(msg).__name__, sender, exc.message, exc.code.name,
                )
                return self._failure(exc, height)
            except BaseException:
                await self._backend.rollback()
                raise

            writes = tx.writes
            try:
                await self._backend.apply(writes)
            except Exception as exc:
                log.error("Call %d commit failed: %s", height, exc)
                return self._failure(StorageWriteError(f"commit failed: {exc}"), height)

            log.debug("Call %d (%s) committed %d writes", height, type(msg).__name__, len(writes))
            return CallResult(success=True, response=response, block_height=height)

    async def query(self, msg: QueryMsg) -> CallResult:
        """Answer a read-only query from committed state."""
        assert self._started, "Host not started. Call start() first."
        try:
            committed = await self._backend.load()
        except Exception as exc:
            log.error("Query could not read committed state: %s", exc)
            return self._failure(StorageReadError(f"storage read failed: {exc}"), self._height)
        deps = Deps(storage=ReadOnlyStorage(committed), entropy=self._entropy)
        try:
            response = contract.query(deps, self._env(), msg)
        except ContractError as exc:
            return self._failure(exc, self._height)
        return CallResult(success=True, response=response, block_height=self._height)

    async def handle(self, sender: str, payload: bytes) -> bytes:
        """Byte-level boundary: one encoded request in, one encoded response out."""
        try:
            if wire.is_query(payload):
                result = await self.query(wire.decode_query(payload))
            else:
                result = await self.execute(sender, wire.decode_execute(payload))
        except ContractError as exc:
            log.warning("Rejected undecodable request from %s: %s", sender, exc.message)
            return wire.encode_error(exc)
        if not result.success:
            return wire.encode_error(error_from_code(result.error_code or 0, result.error or ""))
        return wire.encode(result.response)


async def open_sqlite_host(
    db_path: str,
    contract_address: str = "ticketseal",
    entropy: EntropySource | None = None,
) -> ContractHost:
    backend = SQLiteBackend(db_path)
    await backend.initialize()
    host = ContractHost(backend, entropy=entropy, contract_address=contract_address)
    await host.start()
    return host
