"""Contract entry points: instantiate, execute, query.

Each entry point runs inside one host transaction. Any raised
``ContractError`` aborts the call and the host discards its writes.
"""

from __future__ import annotations

import logging

from ticketseal.crypto.randomness import RandomnessSource
from ticketseal.engine import issuance, redemption
from ticketseal.errors import InvalidMessage, Unauthorized
from ticketseal.models.env import Deps, Env, MessageInfo
from ticketseal.models.messages import (
    AuthorizeIssuer,
    BatchIssuedResponse,
    BatchResponse,
    ExecuteMsg,
    Instantiate,
    InstantiateResponse,
    IssueBatch,
    IssuerBatchesResponse,
    IssuersResponse,
    IssueTicket,
    QueryBatch,
    QueryIssuerBatches,
    QueryMsg,
    QueryTicketStatus,
    Redeem,
    RedeemResponse,
    Response,
    RevokeIssuer,
    TicketIssuedResponse,
    TicketStatusResponse,
)
from ticketseal.models.records import ContractConfig
from ticketseal.state.store import StateStore

log = logging.getLogger(__name__)


def instantiate(deps: Deps, env: Env, info: MessageInfo) -> InstantiateResponse:
    store = StateStore(deps.storage)
    if store.get_config() is not None:
        raise Unauthorized("contract is already instantiated")
    store.put_config(ContractConfig(owner=info.sender))
    log.info("Contract %s instantiated, owner %s", env.contract_address, info.sender)
    return InstantiateResponse(owner=info.sender)


def execute(deps: Deps, env: Env, info: MessageInfo, msg: ExecuteMsg) -> Response:
    if isinstance(msg, Instantiate):
        return instantiate(deps, env, info)

    store = StateStore(deps.storage)
    store.load_config()

    if isinstance(msg, (AuthorizeIssuer, RevokeIssuer)):
        return _set_issuer(store, info, msg.address, isinstance(msg, AuthorizeIssuer))

    if isinstance(msg, IssueBatch):
        randomness = RandomnessSource.from_host(deps.entropy, msg.entropy)
        issued = issuance.issue_batch(
            store, randomness, info.sender, msg.capacity, env.block.time,
        )
        return BatchIssuedResponse(
            batch_id=issued.batch.batch_id,
            issuer_public_key=issued.signing_key.public_key,
            issuer_secret=issued.signing_key.secret,
        )

    if isinstance(msg, IssueTicket):
        randomness = RandomnessSource.from_host(deps.entropy, msg.entropy)
        credential = issuance.issue_ticket(
            store, randomness, msg.batch_id, msg.issuer_secret,
        )
        return TicketIssuedResponse(
            batch_id=credential.batch_id,
            ticket_id=credential.ticket_id,
            proof=credential.proof,
        )

    if isinstance(msg, Redeem):
        receipt = redemption.redeem(
            store, msg.batch_id, msg.ticket_id, msg.proof, env.block.time,
        )
        return RedeemResponse(receipt=receipt)

    raise InvalidMessage(f"unsupported execute message {type(msg).__name__}")


def query(deps: Deps, env: Env, msg: QueryMsg) -> Response:
    """Read-only dispatch; never writes to storage."""
    store = StateStore(deps.storage)
    store.load_config()

    if isinstance(msg, QueryTicketStatus):
        ticket = redemption.query_ticket_status(store, msg.batch_id, msg.ticket_id)
        return TicketStatusResponse(status=ticket.status, redeemed_at=ticket.redeemed_at)

    if isinstance(msg, QueryBatch):
        batch = redemption.load_batch(store, msg.batch_id)
        return BatchResponse(
            batch_id=batch.batch_id,
            issuer=batch.issuer,
            issuer_public_key=batch.public_key_address,
            capacity=batch.capacity,
            issued_count=batch.issued_count,
            tickets_left=batch.tickets_left,
            sold_out=batch.sold_out,
        )

    if isinstance(msg, QueryIssuerBatches):
        return IssuerBatchesResponse(batch_ids=store.get_issuer_batches(msg.issuer))

    raise InvalidMessage(f"unsupported query message {type(msg).__name__}")


def _set_issuer(
    store: StateStore, info: MessageInfo, address: str, authorized: bool
) -> IssuersResponse:
    config = store.load_config()
    if info.sender != config.owner:
        log.warning("Issuer change rejected: %s is not the owner", info.sender)
        raise Unauthorized("only the contract owner can change issuers")
    if not address:
        raise InvalidMessage("issuer address must not be empty")
    if authorized and address not in config.issuers:
        config.issuers.append(address)
        log.info("Issuer %s authorized", address)
    elif not authorized and address in config.issuers:
        config.issuers.remove(address)
        log.info("Issuer %s revoked", address)
    store.put_config(config)
    return IssuersResponse(issuers=list(config.issuers))
