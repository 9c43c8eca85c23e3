"""
Artifact Reader
===============

Per-request output files for the renderer. Every request renders into its own
file, named after the request id, which is removed once the request is done.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

import aiofiles
import aiofiles.os

from paparazzi.config.logging import get_logger
from .exceptions import ArtifactMissing

logger = get_logger(__name__)


def artifact_path(temp_dir: Path, request_id: str) -> Path:
    return temp_dir / f"render-{request_id}.png"


async def remove_artifact(path: Path) -> None:
    """Delete an output file if it exists."""
    try:
        await aiofiles.os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Failed to remove render artifact", path=str(path), error=str(e))


@asynccontextmanager
async def render_output_path(temp_dir: Path, request_id: str) -> AsyncGenerator[Path, None]:
    """Reserve the output path for one request and clean it up afterwards."""
    path = artifact_path(temp_dir, request_id)
    # A stale file must never be served as this request's image
    await remove_artifact(path)
    try:
        yield path
    finally:
        await remove_artifact(path)


async def read_artifact(path: Path) -> bytes:
    """
    Read a rendered image into memory.

    Raises:
        ArtifactMissing: If the file is missing, unreadable or empty
    """
    try:
        async with aiofiles.open(path, "rb") as f:
            data = await f.read()
    except OSError as e:
        raise ArtifactMissing(f"Render artifact unreadable: {e}") from e

    if not data:
        raise ArtifactMissing(f"Render artifact is empty: {path}")

    return data
