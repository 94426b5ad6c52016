"""
User router — signup, signin, profile update, and user search.

Endpoints:
  POST /api/v1/user/signup  — Register and get a token (opens an account)
  POST /api/v1/user/signin  — Authenticate and get a token
  PUT  /api/v1/user         — Update own profile (auth required)
  GET  /api/v1/user/bulk    — Search users by first/last name

Security notes:
  - Plaintext passwords exist only in memory during request processing;
    they are hashed before any database operation and never logged.
  - No request body logging is installed, so POST bodies containing
    passwords are not written to any log.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.database import get_db, get_write_db
from ledger.dependencies import get_current_user
from ledger.models.user import User
from ledger.schemas.user import (
    MessageResponse,
    SignupResponse,
    TokenResponse,
    UserSearchResponse,
    UserSigninRequest,
    UserSignupRequest,
    UserSummary,
    UserUpdateRequest,
)
from ledger.services import auth_service, user_service

router = APIRouter()


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def signup(
    request: UserSignupRequest,
    db: AsyncSession = Depends(get_write_db),
):
    """
    Register a new user.

    Creates the User and its Account (with a random opening balance) in a
    single transaction and returns a JWT so the user is signed in at once.

    - **username**: 3-30 characters, must not be taken
    - **password**: Minimum 6 characters
    - **first_name** / **last_name**: Required
    """
    user, token = await auth_service.signup(
        db=db,
        username=request.username,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
    )
    return SignupResponse(token=token)


@router.post(
    "/signin",
    response_model=TokenResponse,
    summary="Authenticate and get a token",
)
async def signin(
    request: UserSigninRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Authenticate with username and password.

    Send the returned token on subsequent requests:

        Authorization: Bearer <token>
    """
    user, token = await auth_service.signin(
        db=db,
        username=request.username,
        password=request.password,
    )
    return TokenResponse(token=token)


@router.put(
    "",
    response_model=MessageResponse,
    summary="Update own profile",
)
async def update_profile(
    updates: UserUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_write_db),
):
    """
    Update the authenticated user's password and/or name.

    Only fields the client sent are changed.
    """
    # Only fields present (and non-null) in the request body
    await user_service.update_profile(
        db, user.id, updates.model_dump(exclude_unset=True, exclude_none=True)
    )
    return MessageResponse(message="Updated successfully")


@router.get(
    "/bulk",
    response_model=UserSearchResponse,
    summary="Search users by name",
)
async def search_users(
    filter: str = "",
    db: AsyncSession = Depends(get_db),
):
    """
    List users whose first or last name contains `filter` (case-insensitive).

    Used to pick the recipient of a transfer.
    """
    users = await user_service.search_users(db, filter)
    return UserSearchResponse(users=[UserSummary.model_validate(u) for u in users])
