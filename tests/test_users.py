"""
Tests for profile updates and user search.

These tests verify:
  - PUT /api/v1/user updates names and re-hashes a new password
  - Omitted fields are left alone
  - GET /api/v1/user/bulk matches first or last name, case-insensitively
  - LIKE wildcards in the filter are matched literally
"""


USER_URL = "/api/v1/user"
BULK_URL = "/api/v1/user/bulk"


class TestProfileUpdate:
    """Tests for PUT /api/v1/user."""

    async def test_update_names(self, client, signup_user):
        headers, user_id = await signup_user("jane", "Jane", "Doe")

        response = await client.put(
            USER_URL, json={"first_name": "Janet", "last_name": "Smith"}, headers=headers
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Updated successfully"}
        users = (await client.get(BULK_URL, params={"filter": "janet"})).json()["users"]
        assert [u["id"] for u in users] == [str(user_id)]
        assert users[0]["last_name"] == "Smith"

    async def test_partial_update_keeps_other_fields(self, client, signup_user):
        headers, _ = await signup_user("jane", "Jane", "Doe")

        await client.put(USER_URL, json={"last_name": "Roe"}, headers=headers)

        users = (await client.get(BULK_URL, params={"filter": "roe"})).json()["users"]
        assert users[0]["first_name"] == "Jane"

    async def test_update_password(self, client, signup_user):
        headers, _ = await signup_user("jane")

        response = await client.put(USER_URL, json={"password": "BrandNew123"}, headers=headers)
        assert response.status_code == 200

        old = await client.post(
            f"{USER_URL}/signin", json={"username": "jane", "password": "SecurePass123!"}
        )
        new = await client.post(
            f"{USER_URL}/signin", json={"username": "jane", "password": "BrandNew123"}
        )
        assert old.status_code == 401
        assert new.status_code == 200

    async def test_update_rejects_short_password(self, client, signup_user):
        headers, _ = await signup_user("jane")

        response = await client.put(USER_URL, json={"password": "123"}, headers=headers)

        assert response.status_code == 422

    async def test_update_requires_authentication(self, client):
        response = await client.put(USER_URL, json={"first_name": "Mallory"})
        assert response.status_code == 401


class TestUserSearch:
    """Tests for GET /api/v1/user/bulk."""

    async def test_matches_first_or_last_name(self, client, signup_user):
        await signup_user("alice", "Alice", "Walker")
        await signup_user("bob", "Bob", "Alison")
        await signup_user("carol", "Carol", "King")

        response = await client.get(BULK_URL, params={"filter": "ali"})

        assert response.status_code == 200
        usernames = sorted(u["username"] for u in response.json()["users"])
        assert usernames == ["alice", "bob"]

    async def test_match_is_case_insensitive(self, client, signup_user):
        await signup_user("alice", "Alice", "Walker")

        response = await client.get(BULK_URL, params={"filter": "WALK"})

        assert [u["username"] for u in response.json()["users"]] == ["alice"]

    async def test_empty_filter_returns_everyone(self, client, signup_user):
        await signup_user("alice", "Alice")
        await signup_user("bob", "Bob")

        response = await client.get(BULK_URL)

        assert len(response.json()["users"]) == 2

    async def test_wildcards_are_literal(self, client, signup_user):
        await signup_user("alice", "Alice")

        response = await client.get(BULK_URL, params={"filter": "%"})

        assert response.json()["users"] == []

    async def test_results_never_expose_password(self, client, signup_user):
        await signup_user("alice", "Alice")

        user = (await client.get(BULK_URL)).json()["users"][0]

        assert set(user) == {"id", "username", "first_name", "last_name"}
