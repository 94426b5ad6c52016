"""
Transfer service — moves money between two accounts.

THIS IS THE MOST CRITICAL FILE IN THE PROJECT. A transfer either changes
both balances or neither, and the sum of all balances never changes.

Sequence (one atomic unit of the account store per call):
  1. Read the source and destination balances, locking both
  2. Source missing or balance < amount      -> INSUFFICIENT_FUNDS
  3. Destination missing, or same as source  -> INVALID_COUNTERPARTY
  4. Debit the source, credit the destination
  5. Commit; any failure along the way       -> ABORTED

Steps 2 and 3 roll back without writing anything. A failure in any store
call (lock timeout, lost connection, a crash between the debit and the
credit, a failed commit) rolls the whole unit back, so the debit never
becomes visible without its credit.

Outcomes are returned as values, not raised. Rejections are an expected
part of the ledger's life; the HTTP layer decides how to present them.
Nothing here retries: an ABORTED transfer is left to the caller.

Deadlock prevention:
  Both account rows are read in sorted-UUID order, so two opposite
  transfers (A->B and B->A) always lock A and B in the same order.

Self-transfers:
  Sending money to your own account is rejected as INVALID_COUNTERPARTY.
  The funds check still runs first, so a caller who cannot cover the
  amount hears INSUFFICIENT_FUNDS instead.

Missing source vs. poor source:
  Both report INSUFFICIENT_FUNDS. Either way the source cannot be debited.
"""

import enum
import logging
import uuid

from ledger.store import AccountStore


logger = logging.getLogger(__name__)


class TransferOutcome(str, enum.Enum):
    """Result of a transfer attempt."""
    SUCCESS = "success"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INVALID_COUNTERPARTY = "invalid_counterparty"
    ABORTED = "aborted"


async def transfer(
    store: AccountStore,
    source_id: uuid.UUID,
    dest_id: uuid.UUID,
    amount_cents: int,
) -> TransferOutcome:
    """
    Transfer `amount_cents` from `source_id` to `dest_id`.

    Args:
        store: The account store to run the atomic unit against.
        source_id: The paying account (the authenticated caller).
        dest_id: The receiving account.
        amount_cents: Positive integer amount in cents. Request validation
                      guarantees this; a non-positive value here is a bug.

    Returns:
        The TransferOutcome. Only SUCCESS changes any balance.

    Raises:
        ValueError: If amount_cents is not positive.
    """
    if amount_cents <= 0:
        raise ValueError("amount_cents must be positive")

    try:
        async with store.begin_atomic_unit() as unit:
            balances = {}
            for account_id in sorted({source_id, dest_id}):
                balances[account_id] = await store.get_balance(account_id, unit)

            source_balance = balances[source_id]
            if source_balance is None or source_balance < amount_cents:
                await store.rollback(unit)
                logger.warning(
                    "Transfer of %d cents from %s declined: insufficient funds",
                    amount_cents, source_id,
                )
                return TransferOutcome.INSUFFICIENT_FUNDS

            if dest_id == source_id or balances[dest_id] is None:
                await store.rollback(unit)
                logger.warning(
                    "Transfer of %d cents from %s declined: invalid counterparty %s",
                    amount_cents, source_id, dest_id,
                )
                return TransferOutcome.INVALID_COUNTERPARTY

            await store.adjust_balance(source_id, -amount_cents, unit)
            await store.adjust_balance(dest_id, amount_cents, unit)
            await store.commit(unit)
    except Exception:
        logger.exception(
            "Transfer of %d cents from %s to %s aborted",
            amount_cents, source_id, dest_id,
        )
        return TransferOutcome.ABORTED

    logger.info(
        "Transferred %d cents from %s to %s", amount_cents, source_id, dest_id
    )
    return TransferOutcome.SUCCESS
