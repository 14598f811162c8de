"""System and transparency endpoints for the Ponder cycle API."""

from __future__ import annotations

import time

from fastapi import APIRouter

from ponder_cycle.core.notifications import TriggerTick
from ponder_cycle.core.settings import settings

router = APIRouter(prefix="/system", tags=["system", "transparency"])


@router.get("/config")
async def get_public_config() -> dict[str, object]:
    """Return the public cycle configuration.

    Both the client and the scheduled trigger must run with these exact
    values; exposing them lets either side check it agrees with the server.

    Returns:
        Dictionary with the zone, anchor, window times and trigger ticks
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
            "debug": settings.debug,
        },
        "cycle": {
            "timezone": settings.cycle_timezone,
            "anchor": str(settings.anchor),
            "flip_hour": settings.phase_flip_hour,
        },
        "prompt": {
            "available_time": settings.prompt_available_time.isoformat(),
            "response_close_time": settings.response_close_time.isoformat(),
            "release_time": settings.post_release_time.isoformat(),
            "grace_minutes": settings.response_grace_minutes,
        },
        "triggers": {
            "ticks": {tick.name.lower(): tick.value for tick in TriggerTick},
            "push_batch_size": settings.push_batch_size,
        },
    }


@router.get("/status")
async def get_system_status() -> dict[str, object]:
    """Get overall system status for monitoring dashboards.

    Returns:
        Dictionary with service information, version, status, and environment
    """
    return {
        "service": "ponder-cycle",
        "version": settings.app_version,
        "status": "operational",
        "timestamp": int(time.time()),
        "environment": "production" if not settings.debug else "development",
    }
