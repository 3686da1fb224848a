import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from practice_starter.app.schemas.common import ApiError

log = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"
DUPLICATE_EMAIL_MESSAGE = "Email already exists"


class AppError(Exception):
    """Base class for errors the API reports to its clients.

    Attributes:
        status_code (int): HTTP status the error maps to.
        message (str): Message safe to return to the client.
        headers (dict[str, str] | None): Extra response headers.

    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = UNEXPECTED_ERROR_MESSAGE
    headers: dict[str, str] | None = None

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class UserNotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"

    def __init__(self, user_id: int | None = None):
        self.user_id = user_id
        super().__init__()

    def __str__(self) -> str:
        if self.user_id is None:
            return self.message
        return f"{self.message}: {self.user_id}"


class DuplicateEmailError(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = DUPLICATE_EMAIL_MESSAGE


class InvalidCredentialsError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidVerificationTokenError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid or expired verification token"


class InvalidSortError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid sort parameter"


def error_response(
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the JSON body shared by every error response.

    Args:
        status_code (int): HTTP status of the response.
        message (str): Message placed in the body.
        headers (dict[str, str] | None): Optional response headers.

    Returns:
        JSONResponse: A response whose body is an `ApiError`.

    """
    return JSONResponse(
        status_code=status_code,
        content=ApiError(message=message).model_dump(),
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    _msg = f"{request.method} {request.url.path} failed: {exc}"
    log.info(_msg)
    return error_response(exc.status_code, exc.message, exc.headers)


async def integrity_error_handler(
    request: Request,
    exc: IntegrityError,
) -> JSONResponse:
    # The unique index on users.email is the only constraint a client can violate.
    _msg = f"{request.method} {request.url.path} violated a constraint: {exc.orig}"
    log.warning(_msg)
    return error_response(status.HTTP_409_CONFLICT, DUPLICATE_EMAIL_MESSAGE)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    _msg = f"Unhandled error on {request.method} {request.url.path}"
    log.exception(_msg)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        UNEXPECTED_ERROR_MESSAGE,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers mapping exceptions to `ApiError` responses.

    Args:
        app (FastAPI): The application to configure.

    Notes:
        1. `AppError` subclasses use their own status code and message.
        2. Database integrity errors map to 409.
        3. Anything else maps to 500 with a generic message and is logged
           with its traceback.
        4. Request validation errors keep FastAPI's default 422 handler.

    """
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
