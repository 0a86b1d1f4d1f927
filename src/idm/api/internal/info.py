"""
Unauthenticated service endpoints for operators and orchestrators.
Plain bodies, no Envelope.
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from idm.api.dependencies import get_app_settings, get_engine
from idm.config.settings import Settings
from idm.database.session import ping

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/internal", tags=["internal"])


@router.get("/info")
async def get_info(settings: Settings = Depends(get_app_settings)) -> dict[str, str]:
    return {"name": settings.APP_NAME, "version": settings.APP_VERSION}


@router.get("/health", response_class=PlainTextResponse)
async def get_health(engine: AsyncEngine = Depends(get_engine)) -> PlainTextResponse:
    try:
        await ping(engine)
    except (SQLAlchemyError, OSError):
        logger.exception("health.database_unreachable")
        return PlainTextResponse("Error pinging database", status_code=503)
    return PlainTextResponse("OK")
