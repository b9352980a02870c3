"""ticketseal - unlinkable, single-use event tickets on a key-value contract host."""

__version__ = "0.1.0"
