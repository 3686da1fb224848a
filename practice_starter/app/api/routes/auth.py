import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from practice_starter.app.api.routes.route_logic import auth as auth_logic
from practice_starter.app.core.config import Settings, get_settings
from practice_starter.app.core.email import EmailService, get_email_service
from practice_starter.app.database.database import get_db
from practice_starter.app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    Token,
)
from practice_starter.app.schemas.common import ApiError

log = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ApiError}},
)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_409_CONFLICT: {"model": ApiError}},
)
def register(
    request: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    email_service: Annotated[EmailService, Depends(get_email_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Response:
    """Register a new account.

    Args:
        request (RegisterRequest): Registration data.
        db (Session): The database session.
        email_service (EmailService): Delivers the verification link.
        settings (Settings): Application settings.

    Returns:
        Response: An empty 201 response.

    Raises:
        DuplicateEmailError: Mapped to 409 when the e-mail is registered.

    """
    auth_logic.register_user(db, request, email_service, settings)
    return Response(status_code=status.HTTP_201_CREATED)


@router.post("/login", responses={status.HTTP_401_UNAUTHORIZED: {"model": ApiError}})
def login(
    request: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """Exchange e-mail and password for a bearer token; 401 on bad credentials."""
    return auth_logic.login_user(db, request.email, request.password, settings)


@router.post("/token")
def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Token:
    """OAuth2 password flow used by the interactive docs.

    The form's `username` field carries the e-mail address.
    """
    auth = auth_logic.login_user(db, form_data.username, form_data.password, settings)
    return Token(access_token=auth.token, token_type="bearer")


@router.get("/verify", responses={status.HTTP_400_BAD_REQUEST: {"model": ApiError}})
def verify(
    token: str,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Confirm an account from the token of its verification link."""
    auth_logic.verify_user(db, token)
    return MessageResponse(message="Account verified")
