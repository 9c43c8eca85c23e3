"""
Render Routes
=============

The render endpoint: query parameters in, PNG out.
"""

import asyncio
import uuid
from typing import Awaitable, TypeVar

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from paparazzi.config.logging import get_logger
from paparazzi.core.rendering.dispatcher import RenderDispatcher
from paparazzi.core.rendering.exceptions import ClientDisconnected
from paparazzi.models.schemas import ErrorResponse

logger = get_logger(__name__)

router = APIRouter(tags=["Rendering"])

T = TypeVar("T")


def get_dispatcher(request: Request) -> RenderDispatcher:
    """Dependency returning the app's render dispatcher."""
    return request.app.state.dispatcher


async def run_until_disconnected(
    request: Request, awaitable: Awaitable[T], poll_interval: float
) -> T:
    """
    Await ``awaitable`` while watching for the client to disconnect.

    The work is cancelled as soon as a disconnect is seen, and whenever this
    coroutine itself is cancelled.

    Raises:
        ClientDisconnected: If the client went away first
    """
    task = asyncio.ensure_future(awaitable)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=poll_interval)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.info("Client disconnected, cancelling render")
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)
                raise ClientDisconnected("Client disconnected before the render finished")
    finally:
        if not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)


@router.get(
    "/",
    response_class=Response,
    responses={
        200: {"content": {"image/png": {}}, "description": "Rendered image"},
        400: {"model": ErrorResponse, "description": "Missing or invalid parameters"},
        502: {"model": ErrorResponse, "description": "Renderer failed"},
        503: {"model": ErrorResponse, "description": "Render queue full"},
        504: {"model": ErrorResponse, "description": "Renderer timed out"},
    },
)
async def render_image(
    request: Request, dispatcher: RenderDispatcher = Depends(get_dispatcher)
) -> Response:
    """
    Render an image from query parameters.

    Recognized parameters: lat, lon, zoom, tilt, rot, width, height, scene.
    """
    request_id = getattr(request.state, "request_id", None) or str(uuid.uuid4())
    query = dict(request.query_params)

    image = await run_until_disconnected(
        request,
        dispatcher.render(query, request_id),
        dispatcher.settings.disconnect_poll_interval,
    )
    return Response(content=image, media_type="image/png")
