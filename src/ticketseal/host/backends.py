"""Committed-state backends for the local host."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Mapping

import aiosqlite

log = logging.getLogger(__name__)

SCHEMA = """
-- Contract key-value state
CREATE TABLE IF NOT EXISTS contract_state (
    key BLOB PRIMARY KEY,
    value BLOB NOT NULL
);
"""


class MemoryBackend:
    """Volatile backend, used by tests and throwaway hosts."""

    def __init__(self, initial: Mapping[bytes, bytes] | None = None) -> None:
        self._data: dict[bytes, bytes] = dict(initial or {})
        self._write_lock = asyncio.Lock()
        self.apply_calls = 0

    async def load(self) -> dict[bytes, bytes]:
        return dict(self._data)

    async def begin(self) -> dict[bytes, bytes]:
        await self._write_lock.acquire()
        return dict(self._data)

    async def apply(self, writes: Mapping[bytes, bytes | None]) -> None:
        self.apply_calls += 1
        try:
            for key, value in writes.items():
                if value is None:
                    self._data.pop(key, None)
                else:
                    self._data[key] = value
        finally:
            self._release()

    async def rollback(self) -> None:
        self._release()

    def _release(self) -> None:
        if self._write_lock.locked():
            self._write_lock.release()

    async def close(self) -> None:
        pass


class SQLiteBackend:
    """SQLite-backed committed state; one SQL transaction per call.

    Several backends (in one or many processes) may open the same file.
    ``begin`` issues ``BEGIN IMMEDIATE``, so writers queue on the SQLite
    lock and every call reads state committed by the others.
    """

    def __init__(self, db_path: str, busy_timeout: float = 30.0) -> None:
        self._db_path = db_path
        self._busy_timeout = busy_timeout
        self._db: aiosqlite.Connection | None = None
        self._cache: dict[bytes, bytes] = {}
        self._version: int | None = None

    async def initialize(self) -> None:
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(self._db_path, timeout=self._busy_timeout)
        await self._db.executescript(SCHEMA)
        await self._db.commit()

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    @property
    def db(self) -> aiosqlite.Connection:
        assert self._db is not None, "Backend not initialized. Call initialize() first."
        return self._db

    async def _refresh(self) -> None:
        # data_version moves only when another connection commits
        async with self.db.execute("PRAGMA data_version") as cur:
            row = await cur.fetchone()
        version = row[0]
        if version == self._version:
            return
        async with self.db.execute("SELECT key, value FROM contract_state") as cur:
            self._cache = {bytes(r[0]): bytes(r[1]) async for r in cur}
        self._version = version
        log.debug("Reloaded %d committed keys (data_version %d)", len(self._cache), version)

    async def load(self) -> dict[bytes, bytes]:
        await self._refresh()
        return dict(self._cache)

    async def begin(self) -> dict[bytes, bytes]:
        await self.db.execute("BEGIN IMMEDIATE")
        try:
            await self._refresh()
        except Exception:
            await self.db.rollback()
            raise
        return dict(self._cache)

    async def apply(self, writes: Mapping[bytes, bytes | None]) -> None:
        upserts = [(k, v) for k, v in writes.items() if v is not None]
        deletes = [(k,) for k, v in writes.items() if v is None]
        try:
            if upserts:
                await self.db.executemany(
                    "INSERT INTO contract_state (key, value) VALUES (?, ?)"
                    " ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                    upserts,
                )
            if deletes:
                await self.db.executemany("DELETE FROM contract_state WHERE key=?", deletes)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        for key, value in writes.items():
            if value is None:
                self._cache.pop(key, None)
            else:
                self._cache[key] = value
        log.debug("Committed %d writes, %d deletes", len(upserts), len(deletes))

    async def rollback(self) -> None:
        await self.db.rollback()
