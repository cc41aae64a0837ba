"""Health check endpoint. Public, no auth required."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from src.dependencies import AppSettings, CycleSettings

router = APIRouter(tags=["system"])


@router.get("/health")
async def health_check(settings: AppSettings, cycle_config: CycleSettings) -> dict:
    """Liveness probe. Returns 200 if the API process is up."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "cycle_config_version": cycle_config.version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
