import logging
from dataclasses import dataclass

from sqlalchemy import Boolean, Column, Index, Integer, String
from sqlalchemy.orm import validates

from practice_starter.app.models import Base

log = logging.getLogger(__name__)


@dataclass
class UserData:
    """Dataclass to hold data for User initialization."""

    email: str
    name: str
    mobile_number: str | None = None
    address: str | None = None
    hashed_password: str | None = None
    is_verified: bool = False
    verification_token: str | None = None
    id_: int | None = None


class User(Base):
    """
    User account.

    Attributes:
        id (int): Unique identifier for the user.
        email (str): Unique e-mail address, also the login name.
        mobile_number (str | None): Optional phone number.
        name (str): Display name.
        address (str | None): Optional postal address.
        hashed_password (str | None): bcrypt hash; None for users created
            through the CRUD API, who cannot log in.
        is_verified (bool): Whether the e-mail address was confirmed.
        verification_token (str | None): Token of the pending verification link.

    """

    __tablename__ = "users"
    __table_args__ = (Index("uk_users_email", "email", unique=True),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(320), nullable=False)
    mobile_number = Column(String(32), nullable=True)
    name = Column(String(120), nullable=False)
    address = Column(String(500), nullable=True)
    hashed_password = Column(String(255), nullable=True)
    is_verified = Column(Boolean, default=False, nullable=False)
    verification_token = Column(String(64), unique=True, nullable=True)

    def __init__(self, data: UserData):
        """
        Initialize a User instance.

        Args:
            data (UserData): The values of the new user.

        Notes:
            1. `email` and `name` go through the validators below.
            2. `id_` is only set when given, for tests and mapping.

        """
        _msg = f"Initializing User with email: {data.email}"
        log.debug(_msg)

        if data.id_ is not None:
            self.id = data.id_
        self.email = data.email
        self.name = data.name
        self.mobile_number = data.mobile_number
        self.address = data.address
        self.hashed_password = data.hashed_password
        self.is_verified = data.is_verified
        self.verification_token = data.verification_token

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"

    @validates("email")
    def validate_email(self, key, email):
        """
        Validate the email field.

        Args:
            key (str): The field name being validated.
            email (str): The e-mail value. Must be a non-empty string.

        Returns:
            str: The e-mail stripped of leading/trailing whitespace.

        """
        if not isinstance(email, str):
            raise ValueError("Email must be a string")
        if not email.strip():
            raise ValueError("Email cannot be empty")
        return email.strip()

    @validates("name")
    def validate_name(self, key, name):
        """
        Validate the name field.

        Args:
            key (str): The field name being validated.
            name (str): The name value. Must be a non-empty string.

        Returns:
            str: The name stripped of leading/trailing whitespace.

        """
        if not isinstance(name, str):
            raise ValueError("Name must be a string")
        if not name.strip():
            raise ValueError("Name cannot be empty")
        return name.strip()

    @validates("is_verified")
    def validate_is_verified(self, key, is_verified):
        if not isinstance(is_verified, bool):
            raise ValueError("is_verified must be a boolean")
        return is_verified
