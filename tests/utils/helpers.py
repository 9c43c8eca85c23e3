"""
Test Helpers
============

Helper functions for common testing operations.
"""

import asyncio
import io
import stat
import sys
import time
from pathlib import Path
from typing import Callable, Tuple

import psutil
from PIL import Image

from paparazzi.config.settings import Settings

STUB_SOURCE = Path(__file__).with_name("stub_renderer.py")


def make_png(size: Tuple[int, int] = (4, 3), color: Tuple[int, int, int] = (200, 30, 30)) -> bytes:
    """Create PNG bytes with Pillow."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def png_size(data: bytes) -> Tuple[int, int]:
    """Decode PNG bytes and return the image size."""
    with Image.open(io.BytesIO(data)) as image:
        assert image.format == "PNG"
        return image.size


def install_stub_renderer(directory: Path) -> Path:
    """Write the stub renderer as an executable script running under this interpreter."""
    script = directory / "paparazzi"
    script.write_text(f"#!{sys.executable}\n" + STUB_SOURCE.read_text())
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


def process_is_gone(pid: int) -> bool:
    """True when no live (non-zombie) process has this pid."""
    try:
        return psutil.Process(pid).status() == psutil.STATUS_ZOMBIE
    except psutil.NoSuchProcess:
        return True


def read_pid(path: Path) -> int:
    return int(path.read_text())


async def wait_for_condition(
    condition: Callable[[], bool],
    timeout: float = 10.0,
    interval: float = 0.05,
    error_message: str = "Condition not met within timeout",
) -> None:
    """Wait for a condition to become true."""
    start_time = time.time()

    while time.time() - start_time < timeout:
        if condition():
            return
        await asyncio.sleep(interval)

    raise TimeoutError(error_message)


def leftover_artifacts(temp_dir: Path) -> list:
    return sorted(p.name for p in temp_dir.iterdir() if p.name.startswith("render-"))


def live_children() -> list:
    """Child processes of the test process that are still running."""
    children = []
    for child in psutil.Process().children(recursive=True):
        try:
            if child.status() != psutil.STATUS_ZOMBIE:
                children.append(child)
        except psutil.NoSuchProcess:
            continue
    return children


def build_settings(base: Path, **overrides) -> Settings:
    """Settings isolated from the environment and the working directory."""
    values = dict(
        environment="testing",
        log_level="DEBUG",
        temp_path=base / "tmp",
        log_path=base / "logs",
        os_release_path=base / "os-release",
        render_timeout=10.0,
        max_concurrent_renders=4,
        max_queued_renders=4,
        disconnect_poll_interval=0.05,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)
