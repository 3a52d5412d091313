"""Liveness check for load balancers and uptime monitors."""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_app_settings, get_async_session
from core.config import Settings
from schemas.common import DataResponse, HealthStatus
from services.exceptions import ServiceUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

DATABASE_UNAVAILABLE = "Database is unavailable."


@router.get("/health", response_model=DataResponse[HealthStatus])
async def health_check(
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_app_settings),
) -> DataResponse[HealthStatus]:
    """
    Report service status; no token required.

    Answers 503 when the database cannot be reached. Missing image storage
    credentials only mark the service as degraded, since everything except
    uploads still works.
    """
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Health check could not reach the database: %s", e)
        raise ServiceUnavailableError(DATABASE_UNAVAILABLE) from e

    return DataResponse(
        data=HealthStatus(
            status="ok" if settings.storage_configured else "degraded",
            database=True,
            image_storage=settings.storage_configured,
        ),
    )
