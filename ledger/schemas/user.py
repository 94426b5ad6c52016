"""
Pydantic schemas for user endpoints (signup, signin, profile, search).

Pydantic validates incoming data automatically: if a required field is
missing or the wrong type, FastAPI returns a 422 error before our code
even runs.

Notice that hashed_password is NEVER included in any response schema.
"""

import uuid

from pydantic import BaseModel, Field


class UserSignupRequest(BaseModel):
    """Request body for POST /api/v1/user/signup."""
    username: str = Field(min_length=3, max_length=30)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=6)


class UserSigninRequest(BaseModel):
    """Request body for POST /api/v1/user/signin."""
    username: str = Field(min_length=3, max_length=30)
    password: str = Field(min_length=6)


class UserUpdateRequest(BaseModel):
    """Request body for PUT /api/v1/user (all fields optional)."""
    password: str | None = Field(None, min_length=6)
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)


class TokenResponse(BaseModel):
    """Response body for successful signin — contains the JWT."""
    token: str


class SignupResponse(BaseModel):
    """Response body for successful signup."""
    message: str = "User created successfully"
    token: str


class MessageResponse(BaseModel):
    message: str


class UserSummary(BaseModel):
    """Public representation of a user in search results."""
    id: uuid.UUID
    username: str
    first_name: str
    last_name: str

    model_config = {"from_attributes": True}


class UserSearchResponse(BaseModel):
    users: list[UserSummary]
