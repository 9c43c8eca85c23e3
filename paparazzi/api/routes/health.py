"""
Health Routes
=============

FastAPI routes for health check endpoints.
"""

import os
import shutil
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends

from paparazzi.config.logging import get_logger
from paparazzi.core.rendering.dispatcher import RenderDispatcher
from paparazzi.models.schemas import HealthStatus
from .render import get_dispatcher

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])


def renderer_available(binary: str, workdir: Optional[Path] = None) -> bool:
    """Check whether the renderer executable resolves to something runnable."""
    candidate = Path(binary)
    if not candidate.is_absolute() and workdir is not None:
        candidate = workdir / candidate
    if candidate.is_file():
        return os.access(candidate, os.X_OK)
    return shutil.which(binary) is not None


@router.get("/health", response_model=HealthStatus)
async def health_check(dispatcher: RenderDispatcher = Depends(get_dispatcher)) -> HealthStatus:
    """Report renderer availability and render queue occupancy."""
    settings = dispatcher.settings
    available = renderer_available(settings.renderer_binary, settings.renderer_workdir)

    health_status = HealthStatus(
        status="healthy" if available else "degraded",
        version=settings.app_version,
        renderer=settings.renderer_binary,
        renderer_available=available,
        platform=dispatcher.runtime.platform_name,
        active_renders=dispatcher.queue.active,
        queued_renders=dispatcher.queue.waiting,
    )

    logger.debug(
        "Health check completed",
        status=health_status.status,
        active_renders=health_status.active_renders,
        queued_renders=health_status.queued_renders,
    )
    return health_status
