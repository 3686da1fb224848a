import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from practice_starter import __version__
from practice_starter.app.api.routes.actuator import router as actuator_router
from practice_starter.app.api.routes.auth import router as auth_router
from practice_starter.app.api.routes.user import router as user_router
from practice_starter.app.core.config import get_settings
from practice_starter.app.core.errors import register_exception_handlers
from practice_starter.app.core.logging_config import configure_logging
from practice_starter.app.middleware import refresh_session_middleware
from practice_starter.app.web.pages import router as web_pages_router

log = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application instance.

    Notes:
        1. Configure logging from the settings.
        2. Initialize the FastAPI application.
        3. Install the exception handlers mapping errors to `ApiError` bodies.
        4. Add CORS middleware allowing any origin (for development only).
        5. Add the sliding session refresh middleware.
        6. Include the user, auth, actuator and page routers.

    """
    settings = get_settings()
    configure_logging(settings.log_level)

    _msg = "Creating FastAPI application"
    log.debug(_msg)

    app = FastAPI(title="Practice Starter API", version=__version__)

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(BaseHTTPMiddleware, dispatch=refresh_session_middleware)

    app.include_router(user_router)
    app.include_router(auth_router)
    app.include_router(actuator_router)
    app.include_router(web_pages_router)

    _msg = "FastAPI application created successfully"
    log.debug(_msg)
    return app


app = create_app()
