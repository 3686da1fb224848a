import logging
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from practice_starter.app.api.routes.route_logic import user_crud
from practice_starter.app.core.errors import (
    DuplicateEmailError,
    InvalidSortError,
    UserNotFoundError,
)
from practice_starter.app.models.user import User
from practice_starter.app.schemas.user import UserRequest

log = logging.getLogger(__name__)


def user_request(email: str = "jane@example.com", name: str = "Jane Doe", **kwargs):
    return UserRequest(email=email, name=name, **kwargs)


class TestCreateUser:
    def test_create_user(self, db_session):
        user = user_crud.create_user(
            db_session,
            user_request(mobile_number="555-0100", address="1 Main St"),
        )

        assert user.id is not None
        assert user.email == "jane@example.com"
        assert user.mobile_number == "555-0100"
        assert user.address == "1 Main St"
        assert user.hashed_password is None
        assert user_crud.user_count(db_session) == 1

    def test_duplicate_email(self, db_session, make_user):
        make_user(email="jane@example.com")

        with pytest.raises(DuplicateEmailError):
            user_crud.create_user(db_session, user_request())

        assert user_crud.user_count(db_session) == 1


class TestGetUser:
    def test_get_user_by_id(self, db_session, make_user):
        user = make_user()
        assert user_crud.get_user_by_id(db_session, user.id) == user

    def test_missing_user(self, db_session):
        with pytest.raises(UserNotFoundError) as excinfo:
            user_crud.get_user_by_id(db_session, 404)
        assert excinfo.value.user_id == 404

    def test_get_user_by_email(self, db_session, make_user):
        user = make_user(email="jane@example.com")
        assert user_crud.get_user_by_email(db_session, "jane@example.com") == user
        assert user_crud.get_user_by_email(db_session, "john@example.com") is None

    def test_get_user_by_verification_token(self, db_session, make_user):
        user = make_user(verification_token="tok")
        assert user_crud.get_user_by_verification_token(db_session, "tok") == user
        assert user_crud.get_user_by_verification_token(db_session, "other") is None


class TestListUsers:
    @pytest.fixture
    def users(self, make_user):
        return [
            make_user(email="carol@example.com", name="Carol"),
            make_user(email="alice@example.com", name="Alice"),
            make_user(email="bob@example.com", name="Bob"),
        ]

    def test_default_sort_by_id(self, db_session, users):
        result = user_crud.list_users(db_session)

        assert [u.name for u in result.items] == ["Carol", "Alice", "Bob"]
        assert result.page == 0
        assert result.size == user_crud.DEFAULT_PAGE_SIZE
        assert result.total == 3
        assert result.total_pages == 1

    def test_paging(self, db_session, users):
        result = user_crud.list_users(db_session, page=1, size=2)

        assert [u.name for u in result.items] == ["Bob"]
        assert result.total == 3
        assert result.total_pages == 2

    def test_page_past_the_end(self, db_session, users):
        result = user_crud.list_users(db_session, page=5, size=2)
        assert result.items == []
        assert result.total == 3

    def test_huge_page_is_empty(self, db_session, users):
        result = user_crud.list_users(db_session, page=10**19, size=2)

        assert result.items == []
        assert result.page == 10**19
        assert result.total == 3
        assert result.total_pages == 2

    @pytest.mark.parametrize(
        ("sort", "expected"),
        [
            ("name", ["Alice", "Bob", "Carol"]),
            ("name,asc", ["Alice", "Bob", "Carol"]),
            ("name,desc", ["Carol", "Bob", "Alice"]),
            ("email,DESC", ["Carol", "Bob", "Alice"]),
            ("id,desc", ["Bob", "Alice", "Carol"]),
        ],
    )
    def test_sort(self, db_session, users, sort, expected):
        result = user_crud.list_users(db_session, sort=sort)
        assert [u.name for u in result.items] == expected

    @pytest.mark.parametrize("sort", ["password", "hashed_password,asc", "name,sideways"])
    def test_invalid_sort(self, db_session, sort):
        with pytest.raises(InvalidSortError):
            user_crud.list_users(db_session, sort=sort)

    def test_empty_table(self, db_session):
        result = user_crud.list_users(db_session)
        assert result.items == []
        assert result.total_pages == 0


class TestUpdateUser:
    def test_update_user(self, db_session, make_user):
        user = make_user(email="jane@example.com", password="s3cret")
        hashed = user.hashed_password

        updated = user_crud.update_user(
            db_session,
            user.id,
            user_request(email="jane.doe@example.com", name="Jane D.", address="2 Main St"),
        )

        assert updated.email == "jane.doe@example.com"
        assert updated.name == "Jane D."
        assert updated.address == "2 Main St"
        assert updated.mobile_number is None
        assert updated.hashed_password == hashed

    def test_keep_own_email(self, db_session, make_user):
        user = make_user(email="jane@example.com")
        updated = user_crud.update_user(db_session, user.id, user_request(name="Janet"))
        assert updated.name == "Janet"

    def test_missing_user(self, db_session):
        with pytest.raises(UserNotFoundError):
            user_crud.update_user(db_session, 1, user_request())

    def test_email_taken_by_other_user(self, db_session, make_user):
        make_user(email="john@example.com", name="John")
        user = make_user(email="jane@example.com", name="Jane")

        with pytest.raises(DuplicateEmailError):
            user_crud.update_user(
                db_session,
                user.id,
                user_request(email="john@example.com", name="Renamed"),
            )

        db_session.expire_all()
        stored = user_crud.get_user_by_id(db_session, user.id)
        assert stored.email == "jane@example.com"
        assert stored.name == "Jane"


class TestDeleteUser:
    def test_delete_user(self, db_session, make_user):
        user = make_user()
        user_crud.delete_user(db_session, user.id)
        assert user_crud.user_count(db_session) == 0

    def test_missing_user(self, db_session):
        with pytest.raises(UserNotFoundError):
            user_crud.delete_user(db_session, 1)


def test_user_count_with_mock_session():
    """
    Test user_count issues a count query on the users table.
    """
    _msg = "test_user_count_with_mock_session starting"
    log.debug(_msg)

    mock_db = MagicMock()
    mock_db.query.return_value.count.return_value = 5

    assert user_crud.user_count(db=mock_db) == 5
    mock_db.query.assert_called_once_with(User)


def test_commit_failure_rolls_back():
    mock_db = MagicMock()
    mock_db.commit.side_effect = OperationalError("COMMIT", {}, Exception("disk full"))

    with pytest.raises(OperationalError):
        user_crud.commit_or_rollback(mock_db)

    mock_db.rollback.assert_called_once()
