"""
Unit tests for UserService.
"""

import pytest

from otp_auth.auth import User
from otp_auth.errors import DomainError, ErrorKind


@pytest.fixture
def twelve_users(user_store):
    return [user_store.create(User.new(f"+1666{i:07d}")) for i in range(12)]


class TestListUsers:

    @pytest.mark.unit
    def test_defaults(self, user_service, twelve_users):
        result = user_service.list_users()

        assert result.page == 1
        assert result.limit == 10
        assert result.total == 12
        assert len(result.users) == 10

    @pytest.mark.unit
    def test_second_page(self, user_service, twelve_users):
        result = user_service.list_users(page=2, limit=10)

        assert [u.id for u in result.users] == [u.id for u in twelve_users[10:]]

    @pytest.mark.unit
    @pytest.mark.parametrize("page,limit", [(0, 10), (-1, 10), (1, 0), (1, 101), (None, None)])
    def test_out_of_range_values_fall_back(self, user_service, twelve_users, page, limit):
        result = user_service.list_users(page=page, limit=limit)

        assert result.page == (page if page and page > 0 else 1)
        assert result.limit == 10

    @pytest.mark.unit
    def test_search(self, user_service, twelve_users):
        result = user_service.list_users(search=twelve_users[3].phone_number)

        assert result.total == 1
        assert result.users[0].id == twelve_users[3].id

    @pytest.mark.unit
    def test_page_beyond_total_is_empty(self, user_service, twelve_users):
        result = user_service.list_users(page=5, limit=10)

        assert result.users == []
        assert result.total == 12

    @pytest.mark.unit
    def test_to_dict(self, user_service, twelve_users):
        data = user_service.list_users(limit=2).to_dict()

        assert data["total"] == 12
        assert len(data["users"]) == 2
        assert data["users"][0]["phone_number"] == twelve_users[0].phone_number


class TestGetUser:

    @pytest.mark.unit
    def test_get_user(self, user_service, sample_user):
        assert user_service.get_user(sample_user.id) == sample_user

    @pytest.mark.unit
    def test_get_unknown_user(self, user_service):
        with pytest.raises(DomainError) as exc:
            user_service.get_user("b3c1f0a2-1111-4222-8333-944455556666")
        assert exc.value.kind == ErrorKind.USER_NOT_FOUND
        assert exc.value.http_status == 404
