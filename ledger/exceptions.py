"""
Custom exception classes and FastAPI exception handlers.

Services raise domain-specific errors without importing HTTP concepts; the
handlers registered here translate them into HTTP responses with a
consistent body: {"detail": "...", "error_type": "..."}.

The transfer engine is the exception to the rule: it reports its outcomes
as plain TransferOutcome values. The account router turns the non-success
outcomes into the transfer errors below at the HTTP boundary.

Exception hierarchy:
    LedgerAPIError (base)
    ├── DuplicateUsernameError     — signup with a taken username
    ├── InvalidCredentialsError    — wrong username or password
    ├── AccountNotFoundError       — caller has no account record
    ├── InsufficientFundsError     — transfer source missing or too poor
    ├── InvalidCounterpartyError   — transfer destination unusable
    └── TransferAbortedError       — transfer could not be committed
"""

import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class LedgerAPIError(Exception):
    """Base exception for all Ledger API domain errors."""

    status_code = 400
    error_type = "ledger_error"

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(self.detail)


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class DuplicateUsernameError(LedgerAPIError):
    """Raised when attempting to sign up with a username that's already in use."""

    status_code = 409
    error_type = "duplicate_username"

    def __init__(self, username: str):
        self.username = username
        super().__init__("Username already taken")


class InvalidCredentialsError(LedgerAPIError):
    """Raised when signin credentials are incorrect."""

    status_code = 401
    error_type = "invalid_credentials"

    def __init__(self):
        super().__init__("Invalid username or password")


class AccountNotFoundError(LedgerAPIError):
    """Raised when a user has no account record."""

    status_code = 404
    error_type = "account_not_found"

    def __init__(self, account_id: uuid.UUID):
        self.account_id = account_id
        super().__init__("Account not found")


class InsufficientFundsError(LedgerAPIError):
    """
    Raised when a transfer cannot debit its source.

    Covers both a missing source account and a balance below the requested
    amount; callers are not told which.
    """

    error_type = "insufficient_funds"

    def __init__(self, account_id: uuid.UUID, requested_cents: int):
        self.account_id = account_id
        self.requested_cents = requested_cents
        super().__init__("Insufficient balance")


class InvalidCounterpartyError(LedgerAPIError):
    """Raised when the transfer destination does not exist or is the source itself."""

    error_type = "invalid_counterparty"

    def __init__(self, account_id: uuid.UUID):
        self.account_id = account_id
        super().__init__("Invalid account")


class TransferAbortedError(LedgerAPIError):
    """
    Raised when a transfer's atomic unit could not be committed.

    Nothing was changed; the caller may retry.
    """

    status_code = 500
    error_type = "transfer_aborted"

    def __init__(self):
        super().__init__("Internal server error")


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register custom exception handlers with the FastAPI application.

    Every LedgerAPIError subclass carries its own status code and
    error_type, so a single handler on the base class covers them all.
    The insufficient-funds response also echoes the requested amount.

    This is called once during app startup in main.py.
    """

    @app.exception_handler(InsufficientFundsError)
    async def insufficient_funds_handler(
        request: Request, exc: InsufficientFundsError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "error_type": exc.error_type,
                "requested_cents": exc.requested_cents,
            },
        )

    @app.exception_handler(LedgerAPIError)
    async def ledger_error_handler(
        request: Request, exc: LedgerAPIError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "error_type": exc.error_type},
        )
