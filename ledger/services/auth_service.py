"""
Authentication service — signup and signin business logic.

This module contains the core auth logic, separated from HTTP concerns.
The router calls these functions and translates the results into HTTP
responses.

Signup flow:
  1. Check if the username is already taken
  2. Hash the password with Argon2id
  3. Create the User and its Account (random opening balance) in a single
     database transaction
  4. Return a JWT token so the user is immediately signed in

Signin flow:
  1. Look up user by username
  2. Verify password against stored hash
  3. Return a JWT token

Security notes:
  - Passwords are hashed before storage (never stored in plaintext)
  - Signin returns the same error for "wrong password" and "unknown
    username" to prevent user enumeration
"""

import logging
import random

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.config import settings
from ledger.exceptions import DuplicateUsernameError, InvalidCredentialsError
from ledger.models.account import Account
from ledger.models.user import User
from ledger.security import hash_password, issue_token, verify_password


logger = logging.getLogger(__name__)


def _opening_balance_cents() -> int:
    """Pick a random opening balance for a new account."""
    return random.randint(
        settings.INITIAL_BALANCE_MIN_CENTS,
        settings.INITIAL_BALANCE_MAX_CENTS,
    )


async def signup(
    db: AsyncSession,
    username: str,
    password: str,
    first_name: str,
    last_name: str,
) -> tuple[User, str]:
    """
    Register a new user and open their account.

    Both records are created in the request's transaction: if either
    insert fails, neither is persisted.

    Returns:
        Tuple of (User instance, JWT token string).

    Raises:
        DuplicateUsernameError: If the username is already taken.
    """
    result = await db.execute(select(User).where(User.username == username))
    if result.scalar_one_or_none() is not None:
        raise DuplicateUsernameError(username)

    user = User(
        username=username,
        hashed_password=hash_password(password),
        first_name=first_name,
        last_name=last_name,
    )
    db.add(user)
    # Flush to get the user.id assigned (needed for the account below).
    # The unique index still decides a race the SELECT above lost.
    try:
        await db.flush()
    except IntegrityError as exc:
        raise DuplicateUsernameError(username) from exc

    account = Account(user_id=user.id, balance_cents=_opening_balance_cents())
    db.add(account)
    await db.flush()

    logger.info("Created user %s with opening balance %d cents", user.id, account.balance_cents)

    token = issue_token(user.id)
    return user, token


async def signin(
    db: AsyncSession,
    username: str,
    password: str,
) -> tuple[User, str]:
    """
    Authenticate a user and return a JWT token.

    Raises:
        InvalidCredentialsError: If the username doesn't exist or the
                                 password is wrong.
    """
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()

    # Same error for both cases, prevents user enumeration
    if user is None or not verify_password(password, user.hashed_password):
        raise InvalidCredentialsError()

    token = issue_token(user.id)
    return user, token
