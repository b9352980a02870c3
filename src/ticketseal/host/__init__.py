"""Local reference host for running the contract."""

from ticketseal.host.backends import MemoryBackend, SQLiteBackend
from ticketseal.host.entropy import SystemEntropy
from ticketseal.host.runtime import ContractHost, open_sqlite_host
from ticketseal.host.transaction import ReadOnlyStorage, TransactionalStorage

__all__ = [
    "ContractHost", "open_sqlite_host",
    "MemoryBackend", "SQLiteBackend",
    "SystemEntropy",
    "ReadOnlyStorage", "TransactionalStorage",
]
