"""
Tests for the balance endpoint (GET /api/v1/account/balance).

These tests verify:
  - The caller sees their own balance as integer cents
  - A user whose account record is missing gets 404
  - The health probe responds
"""

from sqlalchemy import delete

from ledger.models.account import Account


BALANCE_URL = "/api/v1/account/balance"


class TestBalance:

    async def test_balance_is_integer_cents(self, authenticated_client):
        response = await authenticated_client.get(BALANCE_URL)

        assert response.status_code == 200
        assert isinstance(response.json()["balance_cents"], int)

    async def test_each_user_sees_own_balance(self, client, signup_user, session_factory):
        alice, alice_id = await signup_user("alice")
        bob, bob_id = await signup_user("bob")

        alice_balance = (await client.get(BALANCE_URL, headers=alice)).json()["balance_cents"]
        bob_balance = (await client.get(BALANCE_URL, headers=bob)).json()["balance_cents"]

        async with session_factory() as session:
            assert (await session.get(Account, alice_id)).balance_cents == alice_balance
            assert (await session.get(Account, bob_id)).balance_cents == bob_balance

    async def test_missing_account_returns_404(self, client, signup_user, session_factory):
        headers, user_id = await signup_user("alice")
        async with session_factory() as session:
            await session.execute(delete(Account).where(Account.user_id == user_id))
            await session.commit()

        response = await client.get(BALANCE_URL, headers=headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Account not found"


class TestHealth:

    async def test_health_check(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
