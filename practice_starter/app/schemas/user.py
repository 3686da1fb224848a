import logging

from pydantic import ConfigDict, EmailStr, Field, field_validator

from practice_starter.app.schemas.common import CamelModel, strip_not_blank

log = logging.getLogger(__name__)


class UserRequest(CamelModel):
    """Payload for creating or replacing a user.

    Attributes:
        email (EmailStr): Unique e-mail address. email-validator caps it at
            254 characters, within the 320 of the column.
        mobile_number (str | None): Optional phone number, at most 32 characters.
        name (str): Display name, not blank, at most 120 characters.
        address (str | None): Optional address, at most 500 characters.

    """

    email: EmailStr
    mobile_number: str | None = Field(default=None, max_length=32)
    name: str = Field(max_length=120)
    address: str | None = Field(default=None, max_length=500)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return strip_not_blank(value)


class UserResponse(CamelModel):
    """User data returned by the API. Credentials are never included."""

    id: int
    email: str
    mobile_number: str | None = None
    name: str
    address: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UserPage(CamelModel):
    """One page of users.

    Attributes:
        content (list[UserResponse]): Users on this page.
        page (int): Zero-based page index.
        size (int): Requested page size.
        total_elements (int): Number of users across all pages.
        total_pages (int): Number of pages for this size.

    """

    content: list[UserResponse]
    page: int
    size: int
    total_elements: int
    total_pages: int
