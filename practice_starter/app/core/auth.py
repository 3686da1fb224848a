import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from practice_starter.app.api.routes.route_logic.user_crud import get_user_by_email
from practice_starter.app.core.config import get_settings
from practice_starter.app.core.security import oauth2_scheme
from practice_starter.app.database.database import get_db
from practice_starter.app.models.user import User

log = logging.getLogger(__name__)


def _user_from_token(db: Session, token: str | None) -> User | None:
    """Decode a JWT and load the user named by its subject.

    Args:
        db (Session): Database session used to look the user up.
        token (str | None): The encoded JWT.

    Returns:
        User | None: The user, or None when the token is missing, invalid,
            expired, has no subject, or names an unknown user.

    """
    if not token:
        return None

    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
    except JWTError:
        _msg = "Rejected an invalid or expired token"
        log.debug(_msg)
        return None

    email = payload.get("sub")
    if email is None:
        return None

    return get_user_by_email(db, email)


def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Session = Depends(get_db),
) -> User:
    """Retrieve the authenticated user from the bearer token.

    Args:
        token: JWT extracted from the `Authorization` header.
        db: Database session dependency.

    Returns:
        User: The user named by the token's subject.

    Raises:
        HTTPException: 401 "Could not validate credentials" with a
            `WWW-Authenticate: Bearer` header when the token is invalid or
            the user does not exist.

    """
    user = _user_from_token(db, token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_optional_current_user_from_cookie(
    request: Request,
    db: Session = Depends(get_db),
) -> User | None:
    """Retrieve the user logged in through the `access_token` cookie, if any.

    Used by the HTML pages, which render for anonymous visitors too.
    """
    return _user_from_token(db, request.cookies.get("access_token"))
