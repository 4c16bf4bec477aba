"""Health check endpoints."""

import platform
import psutil
from datetime import datetime

from fastapi import APIRouter

from app.config import get_settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.get("/health/detailed")
async def detailed_health():
    """Detailed health check with process and configuration info."""
    settings = get_settings()
    memory = psutil.virtual_memory()
    process = psutil.Process()

    return {
        "status": "healthy" if settings.plan_store_configured else "degraded",
        "timestamp": datetime.utcnow().isoformat(),
        "system": {
            "platform": platform.system(),
            "python": platform.python_version(),
        },
        "memory": {
            "process_rss_mb": round(process.memory_info().rss / (1024**2), 1),
            "system_percent": memory.percent,
        },
        "plan_store": {
            "configured": settings.plan_store_configured,
        },
        "shopping": {
            "locale": settings.shopping_locale,
        },
    }
