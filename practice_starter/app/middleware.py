import logging
from collections.abc import Awaitable, Callable

import jwt
from fastapi import Request
from fastapi.responses import Response

from practice_starter.app.core.config import Settings, get_settings
from practice_starter.app.core.security import create_access_token

log = logging.getLogger(__name__)

SESSION_COOKIE = "access_token"


def set_session_cookie(response: Response, token: str) -> None:
    """Store the access token in the HTTP-only session cookie."""
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        samesite="lax",
        path="/",
    )


async def refresh_session_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Refreshes session token on each request.

    If a valid, unexpired access token is found in the cookies, a new token
    with a renewed expiration time is issued and set in the response cookies.
    This creates a "sliding session" for active users.

    Args:
        request (Request): The incoming request object.
        call_next: The next middleware or route handler.

    Returns:
        Response: The response from the next handler, potentially with a new
            session cookie.

    Notes:
        1.  Attempt to retrieve the `access_token` from the request cookies.
        2.  If a token is present, attempt to decode it.
        3.  If the token decodes and has a subject, create a new token for
            the same subject.
        4.  Pass control to the next handler.
        5.  If a new token was generated and the handler did not set or clear
            the cookie itself (login, logout), set it on the response.
        6.  Missing, invalid or expired tokens are left to the auth dependencies.

    """
    log.debug("refresh_session_middleware: starting")
    new_token: str | None = None
    access_token: str | None = request.cookies.get(SESSION_COOKIE)

    if not access_token:
        log.debug("refresh_session_middleware: no token, passing through")
        return await call_next(request)

    settings: Settings = get_settings()

    try:
        payload = jwt.decode(
            access_token,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
        subject = payload.get("sub")
        if subject:
            new_token = create_access_token(data={"sub": subject}, settings=settings)
            _msg = "Token refreshed."
            log.debug(_msg)
    except jwt.PyJWTError as e:
        _msg = f"Token decoding failed: {e}. Letting auth dependency handle it."
        log.debug(_msg)

    response = await call_next(request)

    cookie_touched = any(
        header.startswith(f"{SESSION_COOKIE}=")
        for header in response.headers.getlist("set-cookie")
    )
    if new_token and not cookie_touched:
        set_session_cookie(response, new_token)
        _msg = "New session token set in response cookie."
        log.debug(_msg)

    log.debug("refresh_session_middleware: returning")
    return response
