"""Liveness endpoint reporting the state of the store and of Redis."""
import logging
from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_rate_limiter
from core.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Overall status plus one entry per backing service."""

    status: Literal["healthy", "degraded"]
    database: Literal["healthy", "unhealthy"]
    redis: Literal["connected", "unavailable"]


async def _database_reachable(db: AsyncSession) -> bool:
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("health_database_unreachable")
        return False
    return True


@router.get("/health", response_model=HealthResponse)
async def health(
    db: AsyncSession = Depends(get_async_session),
    limiter: RateLimiter | None = Depends(get_rate_limiter),
) -> HealthResponse:
    """
    Report whether the service can do its job.

    Only the database decides the overall status; without Redis requests
    are simply not throttled.
    """
    database_ok = await _database_reachable(db)
    redis_ok = limiter is not None and await limiter.ping()
    return HealthResponse(
        status="healthy" if database_ok else "degraded",
        database="healthy" if database_ok else "unhealthy",
        redis="connected" if redis_ok else "unavailable",
    )
