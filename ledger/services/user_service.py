"""
User service — profile updates and user search.
"""

import uuid

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.models.user import User
from ledger.security import hash_password


async def update_profile(
    db: AsyncSession,
    user_id: uuid.UUID,
    updates: dict,
) -> User:
    """
    Apply a partial profile update.

    `updates` holds only the fields the client sent. A new password is
    hashed before it is stored.

    The user is loaded again through `db` rather than taken from
    get_current_user, whose object belongs to the request's read session.
    """
    user = await db.get(User, user_id)

    password = updates.pop("password", None)
    if password is not None:
        user.hashed_password = hash_password(password)

    for field, value in updates.items():
        setattr(user, field, value)

    await db.flush()
    return user


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def search_users(db: AsyncSession, name_filter: str = "") -> list[User]:
    """
    Find users whose first or last name contains `name_filter`.

    Matching is case-insensitive. An empty filter returns every user.
    """
    pattern = f"%{_escape_like(name_filter)}%"
    result = await db.execute(
        select(User)
        .where(
            or_(
                User.first_name.ilike(pattern, escape="\\"),
                User.last_name.ilike(pattern, escape="\\"),
            )
        )
        .order_by(User.username)
    )
    return list(result.scalars().all())
