"""
Render Invoker
==============

Runs the renderer as a child process, without a shell, and waits for it to
exit. The wait is bounded by a timeout and the child is killed if the waiting
task is cancelled, so no renderer outlives the request that started it.
"""

import asyncio
import time
from pathlib import Path
from typing import Optional

from paparazzi.config.logging import get_logger
from paparazzi.models.schemas import RenderCommand
from .exceptions import RenderFailed, RenderTimeout

logger = get_logger(__name__)

STDERR_LOG_LIMIT = 4000


async def _kill(process: asyncio.subprocess.Process) -> None:
    """Kill the process if it is still running and reap it."""
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
    await process.wait()


async def run_render_command(
    command: RenderCommand,
    timeout: float,
    cwd: Optional[Path] = None,
) -> None:
    """
    Execute the renderer and wait for it to finish.

    Args:
        command: Renderer invocation
        timeout: Maximum run time in seconds
        cwd: Working directory for the renderer

    Raises:
        RenderFailed: If the renderer cannot start or exits unsuccessfully
        RenderTimeout: If the renderer runs longer than ``timeout``
    """
    log = logger.bind(program=command.program)
    start = time.monotonic()

    try:
        process = await asyncio.create_subprocess_exec(
            *command.argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
        )
    except OSError as e:
        log.error("Renderer could not be started", error=str(e))
        raise RenderFailed(f"Renderer could not be started: {e}") from e

    log.debug("Renderer started", pid=process.pid, argv=list(command.argv))

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        await _kill(process)
        log.error("Renderer timed out", pid=process.pid, timeout=timeout)
        raise RenderTimeout(f"Renderer exceeded {timeout}s", timeout=timeout)
    except asyncio.CancelledError:
        await _kill(process)
        log.warning("Render cancelled, renderer killed", pid=process.pid)
        raise

    elapsed = time.monotonic() - start
    stderr_text = stderr.decode("utf-8", errors="replace")

    if process.returncode != 0:
        log.error(
            "Renderer exited unsuccessfully",
            pid=process.pid,
            returncode=process.returncode,
            stderr=stderr_text[-STDERR_LOG_LIMIT:],
            elapsed=round(elapsed, 3),
        )
        raise RenderFailed(
            f"Renderer exited with status {process.returncode}",
            returncode=process.returncode,
            stderr=stderr_text,
        )

    log.debug(
        "Renderer finished",
        pid=process.pid,
        elapsed=round(elapsed, 3),
        stdout_bytes=len(stdout),
    )
