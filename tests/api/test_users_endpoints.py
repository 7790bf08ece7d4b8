"""
Integration tests for User API endpoints.

Tests bearer authentication, listing with pagination/search and lookup by id.
"""

import pytest

from otp_auth.auth import User

USERS = "/api/v1/users"
UNKNOWN_ID = "b3c1f0a2-1111-4222-8333-944455556666"


@pytest.fixture
def many_users(services, registered_user):
    """registered_user plus 14 more, in creation order."""
    extra = [services.users.create(User.new(f"+1555{i:07d}")) for i in range(14)]
    return [registered_user] + extra


class TestAuthentication:
    """Bearer token checks on protected routes."""

    @pytest.mark.api
    def test_missing_header(self, api_client):
        response = api_client.get(USERS)

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "MISSING_AUTH_HEADER"

    @pytest.mark.api
    def test_wrong_scheme(self, api_client):
        response = api_client.get(USERS, headers={"Authorization": "Token abc"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_AUTH_FORMAT"

    @pytest.mark.api
    def test_invalid_token(self, api_client):
        response = api_client.get(USERS, headers={"Authorization": "Bearer not.a.token"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_TOKEN"

    @pytest.mark.api
    def test_get_user_requires_token(self, api_client, registered_user):
        response = api_client.get(f"{USERS}/{registered_user.id}")
        assert response.status_code == 401


class TestListUsers:
    """Tests for GET /api/v1/users."""

    @pytest.mark.api
    def test_default_page(self, authenticated_client, many_users):
        response = authenticated_client.get(USERS)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 15
        assert data["page"] == 1
        assert data["limit"] == 10
        assert [u["id"] for u in data["users"]] == [u.id for u in many_users[:10]]

    @pytest.mark.api
    def test_second_page(self, authenticated_client, many_users):
        response = authenticated_client.get(USERS, params={"page": 2, "limit": 10})

        data = response.json()
        assert [u["id"] for u in data["users"]] == [u.id for u in many_users[10:]]

    @pytest.mark.api
    def test_page_past_end(self, authenticated_client, many_users):
        data = authenticated_client.get(USERS, params={"page": 9, "limit": 10}).json()

        assert data["users"] == []
        assert data["total"] == 15

    @pytest.mark.api
    def test_search_exact_match(self, authenticated_client, many_users):
        target = many_users[4]

        data = authenticated_client.get(USERS, params={"search": target.phone_number}).json()

        assert data["total"] == 1
        assert data["users"][0]["id"] == target.id

    @pytest.mark.api
    def test_search_no_match(self, authenticated_client, many_users):
        data = authenticated_client.get(USERS, params={"search": "+1555"}).json()

        assert data["total"] == 0
        assert data["users"] == []

    @pytest.mark.api
    def test_search_too_short(self, authenticated_client):
        response = authenticated_client.get(USERS, params={"search": "ab"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_SEARCH_QUERY"

    @pytest.mark.api
    @pytest.mark.parametrize("params", [{"limit": "101"}, {"limit": "0"}, {"page": "0"}, {"page": "x"}])
    def test_invalid_pagination(self, authenticated_client, params):
        response = authenticated_client.get(USERS, params=params)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_PAGINATION"


class TestGetUser:
    """Tests for GET /api/v1/users/{user_id}."""

    @pytest.mark.api
    def test_get_user(self, authenticated_client, registered_user):
        response = authenticated_client.get(f"{USERS}/{registered_user.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == registered_user.id
        assert data["phone_number"] == registered_user.phone_number

    @pytest.mark.api
    def test_unknown_user(self, authenticated_client):
        response = authenticated_client.get(f"{USERS}/{UNKNOWN_ID}")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "USER_NOT_FOUND"

    @pytest.mark.api
    def test_malformed_id(self, authenticated_client):
        response = authenticated_client.get(f"{USERS}/not-a-uuid")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_USER_ID"
