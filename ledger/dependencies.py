"""
FastAPI dependencies for authentication and the account store.

Dependencies are reusable functions that FastAPI injects into route
handlers:

  get_current_user (JWT -> User)
      Every protected endpoint declares it. If the token is missing,
      expired, or names an unknown user, the request is rejected with 401
      before the route handler runs.

  get_account_store (-> AccountStore)
      The store the transfer engine runs its atomic units against. Each
      unit opens its own session, separate from the request's get_db
      session. Tests override this dependency to point at their database.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.database import AsyncSessionLocal, get_db
from ledger.models.user import User
from ledger.security import token_user_id
from ledger.store import AccountStore


# Reads the "Authorization: Bearer <token>" header. tokenUrl is only used
# by Swagger UI's "Authorize" button.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/user/signin")


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Extract and validate the JWT token, then return the corresponding User.

    Raises:
        HTTPException 401: If the token is invalid or the user doesn't exist.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        user_id = token_user_id(token)
    except (JWTError, ValueError):
        raise credentials_exception

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise credentials_exception

    return user


def get_account_store() -> AccountStore:
    """Provide the account store backed by the application database."""
    return AccountStore(AsyncSessionLocal)
