"""
SQLAlchemy ORM models package.

All models are imported here so that Base.metadata knows every table
before create_all() runs, and so other modules can import from
ledger.models directly.
"""

from ledger.models.user import User  # noqa: F401
from ledger.models.account import Account  # noqa: F401
