import logging
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from sqlalchemy.orm import Session

from practice_starter.app.api.routes.route_logic import auth as auth_logic
from practice_starter.app.core.auth import get_optional_current_user_from_cookie
from practice_starter.app.core.config import Settings, get_settings
from practice_starter.app.core.email import EmailService, get_email_service
from practice_starter.app.core.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidVerificationTokenError,
)
from practice_starter.app.database.database import get_db
from practice_starter.app.middleware import SESSION_COOKIE, set_session_cookie
from practice_starter.app.models.user import User
from practice_starter.app.schemas.auth import RegisterRequest

log = logging.getLogger(__name__)

router = APIRouter(include_in_schema=False)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@router.get("/", response_class=HTMLResponse, name="home_page")
def home_page(
    request: Request,
    user: Annotated[User | None, Depends(get_optional_current_user_from_cookie)],
) -> HTMLResponse:
    """Serve the home page, greeting the logged in user if there is one."""
    return templates.TemplateResponse(request, "index.html", {"user": user})


@router.get("/login", response_class=HTMLResponse, name="login_page")
def login_page(request: Request) -> HTMLResponse:
    _msg = "Login page requested"
    log.debug(_msg)
    return templates.TemplateResponse(request, "login.html")


@router.post("/login", response_class=HTMLResponse, response_model=None)
def login_form(
    request: Request,
    email: Annotated[str, Form()],
    password: Annotated[str, Form()],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> RedirectResponse | HTMLResponse:
    """Handle the login form and create a session cookie.

    Args:
        request: The HTTP request object.
        email (str): The e-mail from the form.
        password (str): The password from the form.
        db (Session): The database session.
        settings (Settings): The application settings.

    Returns:
        RedirectResponse: 303 to the home page on success, with the cookie set.
        HTMLResponse: The login page again, with 401 and an error message.

    """
    try:
        auth = auth_logic.login_user(db, email, password, settings)
    except InvalidCredentialsError as e:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"error_message": e.message, "email": email},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookie(response, auth.token)
    return response


@router.get("/logout")
def logout() -> RedirectResponse:
    response = RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(SESSION_COOKIE, path="/")
    return response


@router.get("/register", response_class=HTMLResponse, name="register_page")
def register_page(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "register.html")


@router.post("/register", response_class=HTMLResponse)
def register_form(
    request: Request,
    email: Annotated[str, Form()],
    password: Annotated[str, Form()],
    name: Annotated[str, Form()],
    db: Annotated[Session, Depends(get_db)],
    email_service: Annotated[EmailService, Depends(get_email_service)],
    settings: Annotated[Settings, Depends(get_settings)],
    mobile_number: Annotated[str | None, Form()] = None,
    address: Annotated[str | None, Form()] = None,
) -> HTMLResponse:
    """Handle the registration form.

    Notes:
        1. Validate the form through `RegisterRequest`; on failure re-render
           the form with 400 and the first validation message.
        2. Register the account; a duplicate e-mail re-renders with 409.
        3. On success render the "check your inbox" page.

    """
    form = {
        "email": email,
        "name": name,
        "mobile_number": mobile_number or None,
        "address": address or None,
    }
    try:
        register_request = RegisterRequest(password=password, **form)
    except ValidationError as e:
        return templates.TemplateResponse(
            request,
            "register.html",
            {"error_message": e.errors()[0]["msg"], "form": form},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    try:
        user = auth_logic.register_user(db, register_request, email_service, settings)
    except DuplicateEmailError as e:
        return templates.TemplateResponse(
            request,
            "register.html",
            {"error_message": e.message, "form": form},
            status_code=status.HTTP_409_CONFLICT,
        )

    return templates.TemplateResponse(
        request,
        "registered.html",
        {"email": user.email},
        status_code=status.HTTP_201_CREATED,
    )


@router.get("/verify", response_class=HTMLResponse, name="verify_page")
def verify_page(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    token: str = "",
) -> HTMLResponse:
    """Confirm an account from its e-mail link and render the outcome."""
    try:
        user = auth_logic.verify_user(db, token)
    except InvalidVerificationTokenError as e:
        return templates.TemplateResponse(
            request,
            "verify.html",
            {"verified": False, "error_message": e.message},
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    return templates.TemplateResponse(
        request,
        "verify.html",
        {"verified": True, "email": user.email},
    )
