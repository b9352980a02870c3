"""Persisted contract state."""

from ticketseal.state.store import StateStore

__all__ = ["StateStore"]
