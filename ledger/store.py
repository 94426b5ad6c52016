"""
Account store — atomic units of work over the accounts table.

The transfer engine never talks to a session directly. It opens an
AtomicUnit, reads and adjusts balances through the store, and then either
commits or rolls back. Everything done inside one unit becomes visible to
other units at commit time, all at once, or not at all.

Usage:
    async with store.begin_atomic_unit() as unit:
        balance = await store.get_balance(account_id, unit)
        await store.adjust_balance(account_id, -500, unit)
        await store.commit(unit)

Leaving the `async with` block without a commit (an early return, an
exception, task cancellation) rolls the unit back. The unit's session is
closed on exit either way.

Isolation:
  - PostgreSQL: get_balance() issues SELECT ... FOR UPDATE, so the rows a
    unit has read stay locked until it ends. Callers that read two rows
    should read them in a consistent order to avoid deadlocks.
  - SQLite: the unit's connection starts with BEGIN IMMEDIATE (see
    ledger/database.py), holding the database write lock for the unit's
    whole lifetime.
"""

import logging
import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ledger.database import SQLITE_BEGIN_IMMEDIATE
from ledger.models.account import Account


logger = logging.getLogger(__name__)


class AtomicUnit:
    """
    One isolated unit of work against the account store.

    Wraps a single AsyncSession. The transaction begins when the unit is
    entered and ends with exactly one commit or rollback.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.closed = False

    async def __aenter__(self) -> "AtomicUnit":
        # Starts the transaction right away so the unit owns its locks
        # before the first read.
        try:
            await self.session.connection(
                execution_options={SQLITE_BEGIN_IMMEDIATE: True}
            )
        except BaseException:
            await self.session.close()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            if not self.closed:
                if exc_type is not None:
                    logger.debug("Rolling back atomic unit after %s", exc_type.__name__)
                await self.session.rollback()
                self.closed = True
        finally:
            await self.session.close()


class AccountStore:
    """Keyed access to account balances, scoped to atomic units."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    def begin_atomic_unit(self) -> AtomicUnit:
        """Open a new isolated unit of work (use with `async with`)."""
        return AtomicUnit(self._session_factory())

    async def get_balance(
        self,
        account_id: uuid.UUID,
        unit: AtomicUnit,
    ) -> int | None:
        """
        Read an account's balance within the unit, locking the row.

        Returns None if the account does not exist. Reflects adjustments
        already made earlier in the same unit.
        """
        result = await unit.session.execute(
            select(Account.balance_cents)
            .where(Account.user_id == account_id)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def adjust_balance(
        self,
        account_id: uuid.UUID,
        delta_cents: int,
        unit: AtomicUnit,
    ) -> None:
        """
        Add `delta_cents` (may be negative) to an account's balance.

        The change stays inside the unit until commit.
        """
        await unit.session.execute(
            update(Account)
            .where(Account.user_id == account_id)
            .values(balance_cents=Account.balance_cents + delta_cents)
        )

    async def commit(self, unit: AtomicUnit) -> None:
        """
        Durably apply every adjustment made in the unit.

        If the commit fails, the database has applied nothing; the error
        propagates and the unit is rolled back when it exits.
        """
        await unit.session.commit()
        unit.closed = True

    async def rollback(self, unit: AtomicUnit) -> None:
        """Discard every adjustment made in the unit."""
        await unit.session.rollback()
        unit.closed = True
