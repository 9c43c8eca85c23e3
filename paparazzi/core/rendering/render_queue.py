"""
Render Queue
============

Admission control for renderer processes. At most ``max_concurrent`` renders
run at once and at most ``max_queued`` more requests wait for a slot; anything
beyond that is turned away immediately with ServerBusy.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from paparazzi.config.logging import get_logger
from .exceptions import ServerBusy

logger = get_logger(__name__)


class RenderQueue:
    """Bounded pool of render slots."""

    def __init__(self, max_concurrent: int = 2, max_queued: int = 8):
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        if max_queued < 0:
            raise ValueError("max_queued must not be negative")

        self.max_concurrent = max_concurrent
        self.max_queued = max_queued
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._admitted = 0
        self._active = 0
        self.logger = logger.bind(component="render_queue")

    @property
    def capacity(self) -> int:
        return self.max_concurrent + self.max_queued

    @property
    def active(self) -> int:
        """Renders currently holding a slot."""
        return self._active

    @property
    def waiting(self) -> int:
        """Admitted requests still waiting for a slot."""
        return self._admitted - self._active

    @asynccontextmanager
    async def slot(self) -> AsyncGenerator[None, None]:
        """Hold a render slot for the duration of the block."""
        if self._admitted >= self.capacity:
            self.logger.warning(
                "Render rejected, queue full",
                active=self._active,
                waiting=self.waiting,
                capacity=self.capacity,
            )
            raise ServerBusy("Render queue is full")

        self._admitted += 1
        try:
            async with self._semaphore:
                self._active += 1
                try:
                    yield
                finally:
                    self._active -= 1
        finally:
            self._admitted -= 1
