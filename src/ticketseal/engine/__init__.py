"""Issuance and redemption engines."""

from ticketseal.engine.issuance import IssuedBatch, issue_batch, issue_ticket
from ticketseal.engine.redemption import query_ticket_status, redeem

__all__ = ["IssuedBatch", "issue_batch", "issue_ticket", "query_ticket_status", "redeem"]
