"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import os
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from ticketseal.models.config import HostConfig


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "TICKETSEAL_",
) -> HostConfig:
    """Load host configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (TICKETSEAL_DB_PATH, etc.)
        2. TOML config file
        3. Defaults from HostConfig
    """
    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    cfg = HostConfig()

    # ── Host section ───────────────────────────────────────
    host = raw.get("host", {})
    if v := host.get("db_path"):
        cfg.db_path = str(v)
    if v := host.get("contract_address"):
        cfg.contract_address = str(v)
    if v := host.get("log_level"):
        cfg.log_level = str(v)

    # ── Issuer section ─────────────────────────────────────
    issuer = raw.get("issuer", {})
    if v := issuer.get("address"):
        cfg.sender = str(v)
    if v := issuer.get("secret"):
        cfg.issuer_secret = str(v)

    # ── Environment variable overrides (highest priority) ──
    if db_path := os.environ.get(f"{env_prefix}DB_PATH"):
        cfg.db_path = db_path
    if sender := os.environ.get(f"{env_prefix}SENDER"):
        cfg.sender = sender
    if secret := os.environ.get(f"{env_prefix}ISSUER_SECRET"):
        cfg.issuer_secret = secret
    if level := os.environ.get(f"{env_prefix}LOG_LEVEL"):
        cfg.log_level = level

    if cfg.db_path != ":memory:":
        cfg.db_path = str(Path(cfg.db_path).expanduser())

    return cfg
