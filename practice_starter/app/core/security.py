import logging
import secrets
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Optional

import bcrypt
from fastapi.security import OAuth2PasswordBearer
from jose import jwt
from sqlalchemy.orm import Session

from practice_starter.app.core.config import Settings

if TYPE_CHECKING:
    from practice_starter.app.models.user import User

log = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")


def create_access_token(
    data: dict,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token.

    Args:
        data (dict): The claims to encode in the token (e.g. `sub`).
        settings (Settings): The application settings object.
        expires_delta (Optional[timedelta]): Custom lifetime of the token. If None,
            `settings.access_token_expire_minutes` is used.

    Returns:
        str: The encoded JWT token.

    Notes:
        1. Copy the data to avoid modifying the original.
        2. Set the `exp` claim.
        3. Encode the claims with the secret key and algorithm.

    """
    _msg = "Creating access token"
    log.debug(_msg)
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(
            minutes=settings.access_token_expire_minutes,
        )
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.algorithm,
    )
    return encoded_jwt


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a bcrypt hash.

    Args:
        plain_password (str): The plain text password to verify.
        hashed_password (str): The hash to compare against.

    Returns:
        bool: True if the password matches, False otherwise.

    """
    _msg = "Verifying password"
    log.debug(_msg)
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


def get_password_hash(password: str) -> str:
    """Hash a plain password with bcrypt.

    Args:
        password (str): The plain text password to hash.

    Returns:
        str: The hashed password.

    """
    _msg = "Hashing password"
    log.debug(_msg)
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def generate_verification_token() -> str:
    """Return a random, url-safe token for e-mail verification links."""
    return secrets.token_urlsafe(32)


def authenticate_user(db: Session, email: str, password: str) -> Optional["User"]:
    """Authenticate a user by e-mail and password.

    Args:
        db (Session): Database session used to query for user records.
        email (str): E-mail address of the account.
        password (str): Password to verify.

    Returns:
        Optional[User]: The authenticated user if successful, None otherwise.

    Notes:
        1. Query the database for a user with the given e-mail.
        2. Users created through the CRUD API have no password and cannot log in.
        3. If the user exists and the password matches, return the user.

    """
    _msg = f"Authenticating user: {email}"
    log.debug(_msg)

    from practice_starter.app.api.routes.route_logic.user_crud import get_user_by_email

    user = get_user_by_email(db, email)
    if not user or not user.hashed_password:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user
