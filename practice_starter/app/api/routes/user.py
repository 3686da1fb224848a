import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from practice_starter.app.api.routes.route_logic import user_crud
from practice_starter.app.api.routes.route_logic.user_mapper import to_response
from practice_starter.app.core.auth import get_current_user
from practice_starter.app.database.database import get_db
from practice_starter.app.schemas.common import ApiError
from practice_starter.app.schemas.user import UserPage, UserRequest, UserResponse

log = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    dependencies=[Depends(get_current_user)],
    responses={
        status.HTTP_401_UNAUTHORIZED: {"model": ApiError},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ApiError},
    },
)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_409_CONFLICT: {"model": ApiError}},
)
def create_user(
    request: UserRequest,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Create a user.

    Args:
        request (UserRequest): The validated user data.
        db (Session): The database session.

    Returns:
        UserResponse: The created user, with status 201.

    Raises:
        DuplicateEmailError: Mapped to 409 when the e-mail is taken.

    """
    _msg = f"Creating user {request.email}"
    log.debug(_msg)
    user = user_crud.create_user(db, request)
    return to_response(user)


@router.get("/{user_id}", responses={status.HTTP_404_NOT_FOUND: {"model": ApiError}})
def get_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Return one user; 404 when it does not exist."""
    return to_response(user_crud.get_user_by_id(db, user_id))


@router.get("", responses={status.HTTP_400_BAD_REQUEST: {"model": ApiError}})
def list_users(
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query(ge=0)] = 0,
    size: Annotated[int, Query(ge=1, le=user_crud.MAX_PAGE_SIZE)] = (
        user_crud.DEFAULT_PAGE_SIZE
    ),
    sort: Annotated[str | None, Query(description="field[,asc|desc]")] = None,
) -> UserPage:
    """Return one page of users.

    Args:
        db (Session): The database session.
        page (int): Zero-based page index.
        size (int): Page size.
        sort (str | None): Sort order, e.g. `name,desc`.

    Returns:
        UserPage: The page content and paging totals.

    """
    result = user_crud.list_users(db, page=page, size=size, sort=sort)
    return UserPage(
        content=[to_response(user) for user in result.items],
        page=result.page,
        size=result.size,
        total_elements=result.total,
        total_pages=result.total_pages,
    )


@router.put(
    "/{user_id}",
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ApiError},
        status.HTTP_409_CONFLICT: {"model": ApiError},
    },
)
def update_user(
    user_id: int,
    request: UserRequest,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Replace a user's data; 404 when missing, 409 when the e-mail is taken."""
    _msg = f"Updating user {user_id}"
    log.debug(_msg)
    user = user_crud.update_user(db, user_id, request)
    return to_response(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={status.HTTP_404_NOT_FOUND: {"model": ApiError}},
)
def delete_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Delete a user; 204 on success, 404 when missing."""
    _msg = f"Deleting user {user_id}"
    log.debug(_msg)
    user_crud.delete_user(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
