"""
Render Dispatcher
=================

Runs one render request end to end: validate the query, build the renderer
command for a request-scoped output file, wait for a render slot, run the
renderer and read back the image.
"""

import time
from typing import Any, Mapping, Optional

from paparazzi.config.logging import get_logger
from paparazzi.config.platform import RuntimeEnvironment
from paparazzi.config.settings import Settings, get_settings
from .artifact import read_artifact, render_output_path
from .command import build_render_command
from .exceptions import MissingQuery
from .invoker import run_render_command
from .parameters import parse_render_parameters
from .render_queue import RenderQueue

logger = get_logger(__name__)


class RenderDispatcher:
    """Owns the render pipeline shared by all requests of one server process."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        runtime: Optional[RuntimeEnvironment] = None,
        queue: Optional[RenderQueue] = None,
    ):
        self.settings = settings or get_settings()
        self.runtime = runtime or RuntimeEnvironment(port=self.settings.port)
        self.queue = queue or RenderQueue(
            max_concurrent=self.settings.max_concurrent_renders,
            max_queued=self.settings.max_queued_renders,
        )
        self.logger: Any = logger.bind(component="dispatcher")

    async def render(self, query: Mapping[str, str], request_id: str) -> bytes:
        """
        Render the image described by a request's query parameters.

        Args:
            query: Decoded query parameters
            request_id: Unique request identifier, also names the output file

        Returns:
            PNG bytes written by the renderer

        Raises:
            RenderError: Any request-local failure (see exceptions module)
        """
        log = self.logger.bind(request_id=request_id)

        if not query:
            raise MissingQuery("Request has no query parameters")

        parameters = parse_render_parameters(
            query,
            strict=self.settings.strict_parameters,
            max_scene_length=self.settings.max_scene_length,
        )

        temp_dir = self.settings.temp_path.resolve()
        async with render_output_path(temp_dir, request_id) as output_path:
            command = build_render_command(
                parameters,
                executable=self.settings.renderer_binary,
                output_path=output_path,
                prefix=self.runtime.command_prefix,
            )

            async with self.queue.slot():
                log.info(
                    "Render started",
                    parameters=parameters.model_dump(exclude_none=True),
                    active=self.queue.active,
                    waiting=self.queue.waiting,
                )
                start = time.monotonic()
                await run_render_command(
                    command,
                    timeout=self.settings.render_timeout,
                    cwd=self.settings.renderer_workdir,
                )

            image = await read_artifact(output_path)

        log.info(
            "Render completed",
            file_size=len(image),
            processing_time=round(time.monotonic() - start, 3),
        )
        return image
