"""
Password hashing and bearer tokens for ledger users.

Passwords are stored as Argon2id hashes; the plaintext never reaches the
database. A signed-in user carries an HS256 JWT whose "sub" claim is
their user id, which is also the id of their account.
"""

import uuid
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from ledger.config import settings


# deprecated="auto" lets stored hashes from a retired scheme still verify.
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def issue_token(user_id: uuid.UUID, ttl: timedelta | None = None) -> str:
    """
    Sign a token for `user_id`.

    The token expires after `ttl`, or ACCESS_TOKEN_EXPIRE_MINUTES when no
    ttl is given.
    """
    if ttl is None:
        ttl = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": str(user_id),
        "exp": datetime.now(timezone.utc) + ttl,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def token_user_id(token: str) -> uuid.UUID:
    """
    Return the user id a token was issued for.

    Raises:
        JWTError: Bad signature, expired, or no "sub" claim.
        ValueError: "sub" is not a UUID.
    """
    claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    subject = claims.get("sub")
    if subject is None:
        raise JWTError("token has no subject")
    return uuid.UUID(subject)
