"""Protocol interfaces for the host boundary."""

from ticketseal.interfaces.entropy import EntropySource
from ticketseal.interfaces.storage import Storage, StorageBackend

__all__ = ["EntropySource", "Storage", "StorageBackend"]
