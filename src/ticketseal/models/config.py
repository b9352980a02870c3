"""Configuration model for the local host and CLI."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class HostConfig:
    """Complete host configuration."""

    # Host
    db_path: str = "~/.ticketseal/state.db"
    contract_address: str = "ticketseal"
    log_level: str = "info"

    # Caller identity used by the CLI
    sender: str = ""  # Stellar address; loaded from env var TICKETSEAL_SENDER
    issuer_secret: str = ""  # loaded from env var TICKETSEAL_ISSUER_SECRET
