"""CLI entry point for ticketseal."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Awaitable, Callable

import click

from ticketseal.config import load_config
from ticketseal.host.runtime import ContractHost, open_sqlite_host
from ticketseal.models.config import HostConfig
from ticketseal.models.messages import (
    AuthorizeIssuer,
    IssueBatch,
    IssueTicket,
    QueryBatch,
    QueryIssuerBatches,
    QueryTicketStatus,
    Redeem,
    RevokeIssuer,
)
from ticketseal.models.records import CallResult


def _require_sender(cfg: HostConfig) -> None:
    """Exit with error if no caller address is configured."""
    if not cfg.sender:
        click.echo("Error: No sender address configured.", err=True)
        click.echo("Pass --sender, set TICKETSEAL_SENDER, or [issuer] address in config.", err=True)
        sys.exit(1)


def _hex(value: str, name: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError:
        click.echo(f"Error: {name} must be hex.", err=True)
        sys.exit(1)


def _run(cfg: HostConfig, call: Callable[[ContractHost], Awaitable[CallResult]]) -> CallResult:
    async def _main() -> CallResult:
        host = await open_sqlite_host(cfg.db_path, cfg.contract_address)
        try:
            return await call(host)
        finally:
            await host.close()

    result = asyncio.run(_main())
    if not result.success:
        hint = " (retry may succeed)" if result.retryable else ""
        click.echo(f"Error [{result.error_code}]: {result.error}{hint}", err=True)
        sys.exit(2)
    return result


@click.group()
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("--sender", default=None, help="Caller address (overrides config)")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, sender: str | None, verbose: bool) -> None:
    """ticketseal - issue and redeem single-use event tickets."""
    cfg = load_config(config_path)
    if sender:
        cfg.sender = sender
    ctx.ensure_object(dict)
    ctx.obj["cfg"] = cfg

    level = logging.DEBUG if verbose else getattr(logging, cfg.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# ── Info ───────────────────────────────────────────────


@cli.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show host configuration."""
    cfg: HostConfig = ctx.obj["cfg"]
    click.echo(f"DB path:    {cfg.db_path}")
    click.echo(f"Contract:   {cfg.contract_address}")
    click.echo(f"Log level:  {cfg.log_level}")
    click.echo(f"Sender:     {cfg.sender or '(not set)'}")
    click.echo(f"Secret:     {'***configured***' if cfg.issuer_secret else '(not set)'}")


# ── Administration ─────────────────────────────────────


@cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Instantiate the contract; the sender becomes owner."""
    cfg: HostConfig = ctx.obj["cfg"]
    _require_sender(cfg)
    result = _run(cfg, lambda host: host.instantiate(cfg.sender))
    click.echo(f"Contract instantiated. Owner: {result.response.owner}")


@cli.command()
@click.argument("address")
@click.pass_context
def authorize(ctx: click.Context, address: str) -> None:
    """Allow ADDRESS to create ticket batches (owner only)."""
    cfg: HostConfig = ctx.obj["cfg"]
    _require_sender(cfg)
    result = _run(cfg, lambda host: host.execute(cfg.sender, AuthorizeIssuer(address=address)))
    click.echo(f"Issuers: {', '.join(result.response.issuers) or '(none)'}")


@cli.command()
@click.argument("address")
@click.pass_context
def revoke(ctx: click.Context, address: str) -> None:
    """Remove ADDRESS from the issuer list (owner only)."""
    cfg: HostConfig = ctx.obj["cfg"]
    _require_sender(cfg)
    result = _run(cfg, lambda host: host.execute(cfg.sender, RevokeIssuer(address=address)))
    click.echo(f"Issuers: {', '.join(result.response.issuers) or '(none)'}")


# ── Issuance ───────────────────────────────────────────


@cli.command("issue-batch")
@click.argument("capacity", type=int)
@click.option("--entropy", default="", help="Extra caller entropy (hex)")
@click.pass_context
def issue_batch(ctx: click.Context, capacity: int, entropy: str) -> None:
    """Create a batch of CAPACITY tickets with a fresh issuer key."""
    cfg: HostConfig = ctx.obj["cfg"]
    _require_sender(cfg)
    msg = IssueBatch(capacity=capacity, entropy=_hex(entropy, "entropy"))
    result = _run(cfg, lambda host: host.execute(cfg.sender, msg))
    resp = result.response
    click.echo(f"Batch ID:    {resp.batch_id}")
    click.echo(f"Public key:  {resp.issuer_public_key}")
    click.echo(f"Secret:      {resp.issuer_secret}")
    click.echo("")
    click.echo("The secret is shown once and is not stored. Keep it to issue tickets.")


@cli.command("issue-ticket")
@click.argument("batch_id", type=click.IntRange(min=0))
@click.option("--secret", default=None, help="Issuer secret seed (or TICKETSEAL_ISSUER_SECRET)")
@click.option("--entropy", default="", help="Extra caller entropy (hex)")
@click.pass_context
def issue_ticket(ctx: click.Context, batch_id: int, secret: str | None, entropy: str) -> None:
    """Mint one ticket in BATCH_ID."""
    cfg: HostConfig = ctx.obj["cfg"]
    _require_sender(cfg)
    secret = secret or cfg.issuer_secret
    if not secret:
        click.echo("Error: No issuer secret configured.", err=True)
        click.echo("Pass --secret or set TICKETSEAL_ISSUER_SECRET.", err=True)
        sys.exit(1)
    msg = IssueTicket(batch_id=batch_id, issuer_secret=secret, entropy=_hex(entropy, "entropy"))
    result = _run(cfg, lambda host: host.execute(cfg.sender, msg))
    resp = result.response
    click.echo(f"Batch ID:   {resp.batch_id}")
    click.echo(f"Ticket ID:  {resp.ticket_id.hex()}")
    click.echo(f"Proof:      {resp.proof.hex()}")


# ── Redemption ─────────────────────────────────────────


@cli.command()
@click.argument("batch_id", type=click.IntRange(min=0))
@click.argument("ticket_id")
@click.argument("proof")
@click.pass_context
def redeem(ctx: click.Context, batch_id: int, ticket_id: str, proof: str) -> None:
    """Redeem a ticket presented as TICKET_ID and PROOF (hex)."""
    cfg: HostConfig = ctx.obj["cfg"]
    _require_sender(cfg)
    msg = Redeem(
        batch_id=batch_id,
        ticket_id=_hex(ticket_id, "ticket_id"),
        proof=_hex(proof, "proof"),
    )
    result = _run(cfg, lambda host: host.execute(cfg.sender, msg))
    receipt = result.response.receipt
    click.echo(f"REDEEMED ticket {receipt.ticket_id.hex()[:16]}... "
               f"in batch {receipt.batch_id} at {receipt.redeemed_at}")


# ── Queries ────────────────────────────────────────────


@cli.command()
@click.argument("batch_id", type=click.IntRange(min=0))
@click.argument("ticket_id")
@click.pass_context
def status(ctx: click.Context, batch_id: int, ticket_id: str) -> None:
    """Show whether a ticket is still valid."""
    cfg: HostConfig = ctx.obj["cfg"]
    msg = QueryTicketStatus(batch_id=batch_id, ticket_id=_hex(ticket_id, "ticket_id"))
    result = _run(cfg, lambda host: host.query(msg))
    resp = result.response
    click.echo(f"Status:     {resp.status.value}")
    if resp.redeemed_at is not None:
        click.echo(f"Redeemed:   {resp.redeemed_at}")


@cli.command()
@click.argument("batch_id", type=click.IntRange(min=0))
@click.pass_context
def batch(ctx: click.Context, batch_id: int) -> None:
    """Show batch capacity and issuance progress."""
    cfg: HostConfig = ctx.obj["cfg"]
    result = _run(cfg, lambda host: host.query(QueryBatch(batch_id=batch_id)))
    resp = result.response
    click.echo(f"Batch ID:     {resp.batch_id}")
    click.echo(f"Issuer:       {resp.issuer}")
    click.echo(f"Public key:   {resp.issuer_public_key}")
    click.echo(f"Issued:       {resp.issued_count}/{resp.capacity}")
    click.echo(f"Tickets left: {resp.tickets_left}{' (SOLD OUT)' if resp.sold_out else ''}")


@cli.command()
@click.argument("issuer", required=False)
@click.pass_context
def batches(ctx: click.Context, issuer: str | None) -> None:
    """List batch IDs created by ISSUER (default: sender)."""
    cfg: HostConfig = ctx.obj["cfg"]
    issuer = issuer or cfg.sender
    if not issuer:
        _require_sender(cfg)
    result = _run(cfg, lambda host: host.query(QueryIssuerBatches(issuer=issuer)))
    ids = result.response.batch_ids
    if not ids:
        click.echo("No batches.")
        return
    for batch_id in ids:
        click.echo(str(batch_id))


if __name__ == "__main__":
    cli()
