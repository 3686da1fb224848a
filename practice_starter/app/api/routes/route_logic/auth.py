import logging

from sqlalchemy.orm import Session

from practice_starter.app.api.routes.route_logic.user_crud import (
    commit_or_rollback,
    email_exists,
    get_user_by_verification_token,
)
from practice_starter.app.core.config import Settings
from practice_starter.app.core.email import EmailService
from practice_starter.app.core.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidVerificationTokenError,
)
from practice_starter.app.core.security import (
    authenticate_user,
    create_access_token,
    generate_verification_token,
    get_password_hash,
)
from practice_starter.app.models.user import User, UserData
from practice_starter.app.schemas.auth import AuthResponse, RegisterRequest

log = logging.getLogger(__name__)


def build_verification_link(settings: Settings, token: str) -> str:
    return f"{settings.app_base_url.rstrip('/')}/verify?token={token}"


def register_user(
    db: Session,
    request: RegisterRequest,
    email_service: EmailService,
    settings: Settings,
) -> User:
    """Register a new, unverified account and send its verification link.

    Args:
        db (Session): The database session.
        request (RegisterRequest): The registration data.
        email_service (EmailService): Service delivering the verification e-mail.
        settings (Settings): Application settings, for the public base URL.

    Returns:
        User: The persisted user.

    Raises:
        DuplicateEmailError: If the e-mail address is already registered.

    Notes:
        1. Check the e-mail is free.
        2. Hash the password and store the user with a fresh verification token.
        3. Send the verification link; delivery problems do not fail registration.
        4. Database access: read then write on the users table.

    """
    _msg = f"Starting register_user for email: {request.email}"
    log.debug(_msg)

    if email_exists(db, request.email):
        _msg = f"Email {request.email} already registered"
        log.debug(_msg)
        raise DuplicateEmailError()

    token = generate_verification_token()
    user = User(
        data=UserData(
            email=request.email,
            name=request.name,
            mobile_number=request.mobile_number,
            address=request.address,
            hashed_password=get_password_hash(request.password),
            is_verified=False,
            verification_token=token,
        ),
    )
    db.add(user)
    commit_or_rollback(db)
    db.refresh(user)

    email_service.send_verification_email(
        user.email,
        build_verification_link(settings, token),
    )

    _msg = f"Registered user: {user.email}"
    log.info(_msg)
    return user


def login_user(db: Session, email: str, password: str, settings: Settings) -> AuthResponse:
    """Authenticate a user and issue an access token.

    Args:
        db (Session): The database session.
        email (str): The account e-mail.
        password (str): The plain text password.
        settings (Settings): Application settings used to sign the token.

    Returns:
        AuthResponse: The JWT and its type ("Bearer").

    Raises:
        InvalidCredentialsError: If the e-mail is unknown or the password is wrong.

    """
    _msg = f"Starting login_user for email: {email}"
    log.debug(_msg)

    user = authenticate_user(db, email, password)
    if not user:
        _msg = f"Authentication failed for email: {email}"
        log.debug(_msg)
        raise InvalidCredentialsError()

    token = create_access_token(data={"sub": user.email}, settings=settings)
    return AuthResponse(token=token, token_type="Bearer")


def verify_user(db: Session, token: str) -> User:
    """Confirm the account owning a verification token.

    Raises:
        InvalidVerificationTokenError: If no account has this token.

    """
    user = get_user_by_verification_token(db, token) if token else None
    if user is None:
        raise InvalidVerificationTokenError()

    user.is_verified = True
    user.verification_token = None
    commit_or_rollback(db)

    _msg = f"Verified user: {user.email}"
    log.info(_msg)
    return user
