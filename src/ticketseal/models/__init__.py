"""Data models for ticketseal."""

from ticketseal.models.config import HostConfig
from ticketseal.models.env import BlockInfo, Deps, Env, MessageInfo
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
from ticketseal.models.records import CallResult, ContractConfig, EventBatch
from ticketseal.models.ticket import RedemptionReceipt, TicketCredential, TicketStatus

__all__ = [
    "HostConfig",
    "BlockInfo", "Deps", "Env", "MessageInfo",
    "AuthorizeIssuer", "Instantiate", "IssueBatch", "IssueTicket", "Redeem",
    "RevokeIssuer", "ExecuteMsg",
    "QueryBatch", "QueryIssuerBatches", "QueryTicketStatus", "QueryMsg",
    "BatchIssuedResponse", "BatchResponse", "InstantiateResponse",
    "IssuerBatchesResponse", "IssuersResponse", "RedeemResponse",
    "TicketIssuedResponse", "TicketStatusResponse", "Response",
    "CallResult", "ContractConfig", "EventBatch",
    "RedemptionReceipt", "TicketCredential", "TicketStatus",
]
