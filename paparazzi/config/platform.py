"""
Platform Detection
==================

Startup-time detection of the host platform. Headless GPU hosts need the
renderer pointed at a virtual X display and listen on a different port.
Detection runs once, synchronously, before the listener binds.
"""

from pathlib import Path
from typing import Optional, Tuple, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from .logging import get_logger
from .settings import get_settings

if TYPE_CHECKING:
    from .settings import Settings

logger = get_logger(__name__)

HEADLESS_GPU_MARKER = 'NAME="Amazon Linux AMI"'


class RuntimeEnvironment(BaseModel):
    """Immutable runtime configuration decided at startup."""

    model_config = ConfigDict(frozen=True)

    port: int = Field(..., description="Listen port")
    command_prefix: Tuple[str, ...] = Field(
        default=(), description="Tokens placed before the renderer executable"
    )
    platform_name: str = Field(default="generic", description="Detected platform")


def read_os_release(path: Path) -> Optional[str]:
    """Read the os-release file, returning None when it is unavailable."""
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("Could not read os-release file", path=str(path), error=str(e))
        return None


def detect_runtime_environment(settings: Optional["Settings"] = None) -> RuntimeEnvironment:
    """Detect the runtime environment from the host's os-release file."""
    settings = settings or get_settings()
    os_release = read_os_release(settings.os_release_path)

    if os_release is not None and os_release.startswith(HEADLESS_GPU_MARKER):
        environment = RuntimeEnvironment(
            port=settings.headless_port,
            command_prefix=("env", f"DISPLAY={settings.headless_display}"),
            platform_name="amazon-linux-headless",
        )
        logger.info(
            "Running on headless GPU server",
            port=environment.port,
            display=settings.headless_display,
        )
        return environment

    return RuntimeEnvironment(port=settings.port)
