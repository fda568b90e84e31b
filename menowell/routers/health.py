"""Health check endpoint — public, no auth required."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from menowell.analytics.content_loader import get_content_library
from menowell.config import get_settings

router = APIRouter(tags=["system"])


@router.get("/health")
async def health_check() -> dict:
    """Liveness probe. Returns 200 if the API process is up."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "content_items": len(get_content_library()),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
