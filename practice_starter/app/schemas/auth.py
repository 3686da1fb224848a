import logging

from pydantic import BaseModel, EmailStr, Field, field_validator

from practice_starter.app.schemas.common import CamelModel, strip_not_blank

log = logging.getLogger(__name__)


class RegisterRequest(CamelModel):
    """Self-registration payload.

    Attributes:
        email (EmailStr): E-mail address, used as the login name.
        password (str): Plain text password; only its hash is stored.
        mobile_number (str | None): Optional phone number.
        name (str): Display name, not blank.
        address (str | None): Optional address.

    """

    email: EmailStr
    password: str = Field(min_length=1)
    mobile_number: str | None = Field(default=None, max_length=32)
    name: str = Field(min_length=1, max_length=120)
    address: str | None = Field(default=None, max_length=500)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return strip_not_blank(value)


class LoginRequest(CamelModel):
    email: str
    password: str


class AuthResponse(CamelModel):
    """Token returned by a successful login.

    Attributes:
        token (str): The JWT access token.
        token_type (str): Always "Bearer".

    """

    token: str
    token_type: str = "Bearer"


class Token(BaseModel):
    """OAuth2 token response, as expected by the interactive API docs."""

    access_token: str
    token_type: str


class MessageResponse(BaseModel):
    message: str
