"""
Pydantic schemas for account endpoints (balance and transfer).

All monetary amounts are in integer cents (e.g., $10.50 = 1050).
"""

import uuid

from pydantic import BaseModel, Field


class BalanceResponse(BaseModel):
    """Response body for GET /api/v1/account/balance."""
    balance_cents: int


class TransferRequest(BaseModel):
    """
    Request body for POST /api/v1/account/transfer.

    The source account is always the authenticated caller's own, so only
    the destination is named here.
    """
    to: uuid.UUID = Field(description="User ID of the receiving account")
    amount_cents: int = Field(gt=0, description="Amount in cents (must be positive)")
