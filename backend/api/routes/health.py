"""Health check endpoints for load balancers and uptime probes."""

import asyncio
import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.config import get_settings
from infrastructure.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()
settings = get_settings()

DB_PROBE_TIMEOUT = 5.0
REDIS_PROBE_TIMEOUT = 3.0


def _service_info() -> dict:
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def _probe_database(db: AsyncSession) -> str:
    try:
        result = await asyncio.wait_for(db.execute(text("SELECT 1")), timeout=DB_PROBE_TIMEOUT)
        result.scalar()
    except TimeoutError:
        logger.error("Database probe timed out after %.0fs", DB_PROBE_TIMEOUT)
        return "error: database timeout"
    except Exception as e:
        logger.error("Database probe failed: %s", e)
        return "error: database check failed"
    return "connected"


@router.get("/health")
async def health_check(request: Request):
    """Process is up; reports which storage and notification backends are wired."""
    notifier = request.app.state.notifier
    return {
        "status": "healthy",
        **_service_info(),
        "storage": settings.storage_type,
        "notifications": "enabled" if notifier.enabled else "disabled",
    }


@router.get("/health/db")
async def health_check_db(db: AsyncSession = Depends(get_db)):
    database = await _probe_database(db)
    return {
        "status": "healthy" if database == "connected" else "degraded",
        **_service_info(),
        "database": database,
    }


@router.get("/health/redis")
async def health_redis():
    """Redis backs the shared rate limiter; without a URL limits are per process."""
    if not settings.redis_url:
        return {"status": "disabled", "service": "redis"}

    import redis.asyncio as aioredis

    client = aioredis.from_url(settings.redis_url)
    try:
        await asyncio.wait_for(client.ping(), timeout=REDIS_PROBE_TIMEOUT)
    except TimeoutError:
        return JSONResponse(status_code=503, content={"error": "Redis timeout"})
    except Exception as e:
        logger.error("Redis probe failed: %s", e)
        return JSONResponse(status_code=503, content={"error": "Redis unavailable"})
    finally:
        await client.aclose()
    return {"status": "healthy", "service": "redis"}


@router.get("/health/live")
async def liveness_check():
    return {"alive": True}
