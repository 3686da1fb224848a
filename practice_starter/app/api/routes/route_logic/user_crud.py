import logging
import math
from dataclasses import dataclass

from sqlalchemy.orm import Session

from practice_starter.app.api.routes.route_logic.user_mapper import to_entity
from practice_starter.app.core.errors import (
    DuplicateEmailError,
    InvalidSortError,
    UserNotFoundError,
)
from practice_starter.app.models.user import User
from practice_starter.app.schemas.user import UserRequest

log = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
SORTABLE_FIELDS = {
    "id": User.id,
    "email": User.email,
    "name": User.name,
}


@dataclass
class UserPageResult:
    """One page of users as read from the database."""

    items: list[User]
    page: int
    size: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.size else 0


def email_exists(db: Session, email: str) -> bool:
    return get_user_by_email(db, email) is not None


def get_user_by_email(db: Session, email: str) -> User | None:
    """Retrieve a user by e-mail address.

    Args:
        db (Session): The database session.
        email (str): The e-mail address to look for.

    Returns:
        User | None: The user if found, otherwise None.

    """
    _msg = f"Querying database for email: {email}"
    log.debug(_msg)
    return db.query(User).filter(User.email == email).first()


def get_user_by_verification_token(db: Session, token: str) -> User | None:
    return db.query(User).filter(User.verification_token == token).first()


def create_user(db: Session, request: UserRequest) -> User:
    """Create a new user from a CRUD request.

    Args:
        db (Session): The database session.
        request (UserRequest): Validated user data.

    Returns:
        User: The persisted user, with its generated id.

    Raises:
        DuplicateEmailError: If another user already has the e-mail address.

    Notes:
        1. Check the e-mail is free before writing.
        2. Map the request to a new `User` without password.
        3. Add, commit and refresh the user.
        4. Database access: read then write on the users table.

    """
    _msg = f"Creating user: {request.email}"
    log.debug(_msg)
    if email_exists(db, request.email):
        _msg = f"Email {request.email} already exists"
        log.debug(_msg)
        raise DuplicateEmailError()

    user = to_entity(request)
    db.add(user)
    commit_or_rollback(db)
    db.refresh(user)
    return user


def get_user_by_id(db: Session, user_id: int) -> User:
    """Retrieve a single user by ID.

    Args:
        db (Session): The database session.
        user_id (int): The ID of the user to retrieve.

    Returns:
        User: The user.

    Raises:
        UserNotFoundError: If no user has this ID.

    """
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise UserNotFoundError(user_id)
    return user


def parse_sort(sort: str | None):
    """Turn a `field[,asc|desc]` sort parameter into an ORDER BY clause.

    Args:
        sort (str | None): The sort parameter. None or empty sorts by id.

    Returns:
        ColumnElement: The ordering clause.

    Raises:
        InvalidSortError: On an unknown field or direction.

    """
    if not sort:
        return User.id.asc()

    field, _, direction = sort.partition(",")
    column = SORTABLE_FIELDS.get(field.strip())
    if column is None:
        raise InvalidSortError(f"Cannot sort by '{field.strip()}'")

    direction = direction.strip().lower() or "asc"
    if direction == "asc":
        return column.asc()
    if direction == "desc":
        return column.desc()
    raise InvalidSortError(f"Unknown sort direction '{direction}'")


def list_users(
    db: Session,
    page: int = 0,
    size: int = DEFAULT_PAGE_SIZE,
    sort: str | None = None,
) -> UserPageResult:
    """Retrieve one page of users.

    Args:
        db (Session): The database session.
        page (int): Zero-based page index.
        size (int): Page size, between 1 and `MAX_PAGE_SIZE`.
        sort (str | None): `field[,asc|desc]` over id, email or name.

    Returns:
        UserPageResult: The users of the page and the overall count.

    Notes:
        1. A page starting past the last user is empty and never queried, so
           an arbitrarily large `page` cannot overflow the database offset.

    """
    order_by = parse_sort(sort)
    query = db.query(User)
    total = query.count()
    offset = page * size
    if offset >= total:
        return UserPageResult(items=[], page=page, size=size, total=total)
    items = query.order_by(order_by).offset(offset).limit(size).all()
    return UserPageResult(items=items, page=page, size=size, total=total)


def update_user(db: Session, user_id: int, request: UserRequest) -> User:
    """Replace the editable fields of a user.

    Args:
        db (Session): The database session.
        user_id (int): The ID of the user to update.
        request (UserRequest): The new values.

    Returns:
        User: The updated user.

    Raises:
        UserNotFoundError: If no user has this ID.
        DuplicateEmailError: If the new e-mail belongs to another user.
            Nothing is written in that case.

    """
    user = get_user_by_id(db, user_id)

    if user.email != request.email and email_exists(db, request.email):
        _msg = f"Cannot move user {user_id} to taken email {request.email}"
        log.debug(_msg)
        raise DuplicateEmailError()

    user.email = request.email
    user.mobile_number = request.mobile_number
    user.name = request.name
    user.address = request.address
    commit_or_rollback(db)
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: int) -> None:
    """Delete a user.

    Raises:
        UserNotFoundError: If no user has this ID.

    """
    user = get_user_by_id(db, user_id)
    db.delete(user)
    commit_or_rollback(db)


def user_count(db: Session) -> int:
    """Counts the total number of users in the database."""
    _msg = "user_count starting"
    log.debug(_msg)
    count = db.query(User).count()
    _msg = "user_count returning"
    log.debug(_msg)
    return count


def commit_or_rollback(db: Session) -> None:
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
