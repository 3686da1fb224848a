import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from practice_starter.app.core.config import Settings, get_settings
from practice_starter.app.database.database import get_db

log = logging.getLogger(__name__)

router = APIRouter(prefix="/actuator", tags=["actuator"])


@router.get("/health")
def health(db: Annotated[Session, Depends(get_db)]) -> JSONResponse:
    """Report whether the application can reach its database.

    Returns:
        JSONResponse: `{"status": "UP"}`, or `{"status": "DOWN"}` with 503
            when `SELECT 1` fails.

    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        _msg = f"Health check failed: {e}"
        log.warning(_msg)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "DOWN"},
        )
    return JSONResponse(content={"status": "UP"})


@router.get("/info")
def info(settings: Annotated[Settings, Depends(get_settings)]) -> dict:
    return {"app": {"name": settings.app_name, "version": settings.project_version}}
