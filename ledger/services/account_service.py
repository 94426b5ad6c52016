"""
Account service — read access to balances.

Balances are only ever written by the transfer engine
(ledger/services/transfer_service.py); this module just reads them.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.exceptions import AccountNotFoundError
from ledger.models.account import Account


async def get_account(
    db: AsyncSession,
    account_id: uuid.UUID,
) -> Account:
    """
    Get an account by its (user) ID.

    Raises:
        AccountNotFoundError: If the account doesn't exist.
    """
    result = await db.execute(select(Account).where(Account.user_id == account_id))
    account = result.scalar_one_or_none()

    if account is None:
        raise AccountNotFoundError(account_id)

    return account


async def get_balance(
    db: AsyncSession,
    account_id: uuid.UUID,
) -> dict:
    """
    Get the current balance of an account.

    Returns:
        Dict with balance_cents.
    """
    account = await get_account(db, account_id)
    return {"balance_cents": account.balance_cents}
