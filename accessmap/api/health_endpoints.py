"""Health check endpoint."""

from fastapi import APIRouter
import time

from accessmap.config.settings import get_settings

router = APIRouter(prefix="/api/v1", tags=["health"])

# Application start time for uptime calculation
_app_start_time = time.time()


@router.get("/health")
async def health_check():
    settings = get_settings()
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
        "uptime_seconds": round(time.time() - _app_start_time, 1),
    }
