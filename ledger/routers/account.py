"""
Account router — balance lookup and money transfers.

Endpoints (both require a JWT):
  GET  /api/v1/account/balance   — The caller's current balance
  POST /api/v1/account/transfer  — Send money to another user

The transfer source is always the caller's own account; the body only
names the destination and the amount.

Transfer outcome -> HTTP response:
  SUCCESS               200  {"message": "Transfer successful"}
  INSUFFICIENT_FUNDS    400  "Insufficient balance"
  INVALID_COUNTERPARTY  400  "Invalid account"
  ABORTED               500  "Internal server error" (nothing changed)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.database import get_db
from ledger.dependencies import get_account_store, get_current_user
from ledger.exceptions import (
    InsufficientFundsError,
    InvalidCounterpartyError,
    TransferAbortedError,
)
from ledger.models.user import User
from ledger.schemas.account import BalanceResponse, TransferRequest
from ledger.schemas.user import MessageResponse
from ledger.services import account_service, transfer_service
from ledger.services.transfer_service import TransferOutcome
from ledger.store import AccountStore

router = APIRouter()


@router.get(
    "/balance",
    response_model=BalanceResponse,
    summary="Check your balance",
)
async def get_balance(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Return the authenticated user's balance in cents."""
    return await account_service.get_balance(db, user.id)


@router.post(
    "/transfer",
    response_model=MessageResponse,
    summary="Transfer money to another user",
)
async def create_transfer(
    request: TransferRequest,
    user: User = Depends(get_current_user),
    store: AccountStore = Depends(get_account_store),
):
    """
    Transfer money from your account to another user's account.

    Atomic: either both balances change or neither does.

    - **to**: User ID of the recipient (see GET /api/v1/user/bulk)
    - **amount_cents**: Positive integer in cents (e.g., $50.00 = 5000)
    """
    outcome = await transfer_service.transfer(
        store=store,
        source_id=user.id,
        dest_id=request.to,
        amount_cents=request.amount_cents,
    )

    if outcome is TransferOutcome.INSUFFICIENT_FUNDS:
        raise InsufficientFundsError(user.id, request.amount_cents)
    if outcome is TransferOutcome.INVALID_COUNTERPARTY:
        raise InvalidCounterpartyError(request.to)
    if outcome is TransferOutcome.ABORTED:
        raise TransferAbortedError()

    return MessageResponse(message="Transfer successful")
