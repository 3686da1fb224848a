import pytest
from pydantic import ValidationError

from practice_starter.app.schemas.auth import AuthResponse, RegisterRequest
from practice_starter.app.schemas.common import ApiError
from practice_starter.app.schemas.user import UserPage, UserRequest, UserResponse


class TestUserRequest:
    def test_accepts_camel_case(self):
        request = UserRequest.model_validate(
            {"email": "jane@example.com", "mobileNumber": "555", "name": "Jane"},
        )
        assert request.mobile_number == "555"

    def test_accepts_snake_case(self):
        request = UserRequest(email="jane@example.com", mobile_number="555", name="Jane")
        assert request.mobile_number == "555"

    def test_name_is_stripped(self):
        assert UserRequest(email="jane@example.com", name="  Jane ").name == "Jane"

    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "not-an-email", "name": "Jane"},
            {"email": "jane@example.com", "name": "   "},
            {"email": "jane@example.com", "name": "x" * 121},
            {"email": "jane@example.com", "name": "Jane", "mobileNumber": "1" * 33},
            {"email": "jane@example.com", "name": "Jane", "address": "a" * 501},
            {"name": "Jane"},
            {"email": "a" * 64 + "@" + ".".join(["b" * 63] * 3) + ".com", "name": "Jane"},
            {"email": "jane@example.com"},
        ],
    )
    def test_invalid_payloads(self, payload):
        with pytest.raises(ValidationError):
            UserRequest.model_validate(payload)


def test_user_response_serializes_camel_case():
    response = UserResponse(id=1, email="jane@example.com", mobile_number="555", name="Jane")
    assert response.model_dump(by_alias=True) == {
        "id": 1,
        "email": "jane@example.com",
        "mobileNumber": "555",
        "name": "Jane",
        "address": None,
    }


def test_user_page_serializes_totals():
    page = UserPage(content=[], page=0, size=20, total_elements=0, total_pages=0)
    dumped = page.model_dump(by_alias=True)
    assert dumped["totalElements"] == 0
    assert dumped["totalPages"] == 0


def test_register_request_requires_password():
    with pytest.raises(ValidationError):
        RegisterRequest(email="jane@example.com", password="", name="Jane")


def test_register_request_rejects_blank_name():
    with pytest.raises(ValidationError) as excinfo:
        RegisterRequest(email="jane@example.com", password="s3cret", name="   ")
    assert "Name cannot be blank" in str(excinfo.value)


def test_register_request_strips_name():
    request = RegisterRequest(email="jane@example.com", password="s3cret", name=" Jane ")
    assert request.name == "Jane"


def test_auth_response_defaults_to_bearer():
    assert AuthResponse(token="abc").model_dump(by_alias=True) == {
        "token": "abc",
        "tokenType": "Bearer",
    }


def test_api_error_has_only_message():
    assert ApiError(message="boom").model_dump() == {"message": "boom"}
