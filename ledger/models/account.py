"""
Account model — the balance record of one user.

An account is keyed by its owner's user ID: user and account identifiers
are the same value, so a transfer's "to" field names a user directly.

Balance management:
  `balance_cents` holds the current balance as integer cents
  ($10.50 = 1050). Integer arithmetic keeps the ledger's total exact across
  any number of transfers; floats would drift.

  The balance is written only by the transfer engine, through the account
  store's atomic units. A CHECK constraint rejects negative balances at the
  database level as a last line behind the engine's own funds check.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Integer, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger.database import Base


class Account(Base):
    __tablename__ = "accounts"

    __table_args__ = (
        CheckConstraint(
            "balance_cents >= 0",
            name="ck_accounts_non_negative_balance",
        ),
    )

    # One account per user; the user ID is the account ID
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id"),
        primary_key=True,
    )

    balance_cents: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    # Audit timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # --- Relationships ---
    user: Mapped["User"] = relationship(
        back_populates="account",
    )
