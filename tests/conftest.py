"""
Test fixtures for the Ledger API test suite.

This module provides shared fixtures used across all test files:

  - db_engine / session_factory: Fresh file-backed SQLite database per test
  - store: AccountStore bound to the test database
  - make_user: Inserts a user + account with a chosen balance (no HTTP)
  - client: Async HTTP test client (unauthenticated)
  - authenticated_client: Test client with a pre-registered user and JWT

Key design decisions:
  - Each test gets its own SQLite file under pytest's tmp_path. A file
    (rather than sqlite+aiosqlite://) gives every session its own
    connection, which is what lets the concurrency tests run two atomic
    units side by side.
  - The engine comes from ledger.database.build_engine, so tests run with
    the same transaction hooks as the application.
  - get_db, get_write_db and get_account_store are overridden so the
    application code works exactly as it does in production, against the
    test database.
"""

import os

# Settings require a secret; set one before anything imports ledger.config
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

import uuid

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ledger.database import Base, build_engine, get_db, get_write_db, session_scope
from ledger.dependencies import get_account_store
from ledger.main import app
from ledger.models.account import Account
from ledger.models.user import User
from ledger.security import hash_password, token_user_id
from ledger.store import AccountStore


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """Create a fresh async engine with all tables for each test."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def store(session_factory):
    return AccountStore(session_factory)


@pytest.fixture
def make_user(session_factory):
    """
    Factory that inserts a user and their account directly.

    Lets engine tests pick exact balances instead of the random opening
    balance that signup assigns.
    """
    counter = 0

    async def _make_user(balance_cents: int, first_name: str = "Test") -> uuid.UUID:
        nonlocal counter
        counter += 1
        async with session_factory() as session:
            user = User(
                username=f"user{counter}",
                first_name=first_name,
                last_name="User",
                hashed_password=hash_password("password123"),
            )
            session.add(user)
            await session.flush()
            session.add(Account(user_id=user.id, balance_cents=balance_cents))
            await session.commit()
            return user.id

    return _make_user


@pytest.fixture
def read_balance(session_factory):
    """Read a committed balance from outside any transfer."""

    async def _read_balance(account_id: uuid.UUID) -> int | None:
        async with session_factory() as session:
            result = await session.execute(
                select(Account.balance_cents).where(Account.user_id == account_id)
            )
            return result.scalar_one_or_none()

    return _read_balance


@pytest.fixture
def ledger_total(session_factory):
    """Sum of every balance in the ledger."""

    async def _ledger_total() -> int:
        async with session_factory() as session:
            result = await session.execute(
                select(func.coalesce(func.sum(Account.balance_cents), 0))
            )
            return result.scalar()

    return _ledger_total


@pytest_asyncio.fixture
async def client(session_factory, store):
    """
    Async HTTP test client with the test database injected.

    Overrides the session and store dependencies so all requests hit the
    per-test database instead of the real one.
    """

    async def override_get_db():
        async with session_scope(session_factory) as session:
            yield session

    async def override_get_write_db():
        async with session_scope(session_factory, write=True) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_write_db] = override_get_write_db
    app.dependency_overrides[get_account_store] = lambda: store

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def signup_user(client):
    """
    Factory that signs up through the real endpoint.

    Returns (auth headers, user_id) so tests can act as several users on
    one client.
    """

    async def _signup_user(
        username: str,
        first_name: str = "Test",
        last_name: str = "User",
    ) -> tuple[dict, uuid.UUID]:
        response = await client.post(
            "/api/v1/user/signup",
            json={
                "username": username,
                "first_name": first_name,
                "last_name": last_name,
                "password": "SecurePass123!",
            },
        )
        assert response.status_code == 201, f"Signup failed: {response.text}"
        token = response.json()["token"]
        user_id = token_user_id(token)
        return {"Authorization": f"Bearer {token}"}, user_id

    return _signup_user


@pytest_asyncio.fixture
async def authenticated_client(client, signup_user):
    """
    Test client with a pre-registered user and JWT token.

    Signs up a test user via the real signup endpoint, then sets the
    Authorization header on the client for all subsequent requests.
    """
    headers, _ = await signup_user("testuser")
    client.headers.update(headers)
    return client
