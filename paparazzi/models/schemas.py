"""
Pydantic Models and Schemas
===========================

Core data models for render requests, renderer commands and API responses.
"""

from typing import Optional, Dict, Any, Iterator, Literal, Tuple
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


# Query parameter name -> renderer flag, in canonical command-line order
PARAMETER_FLAGS: Tuple[Tuple[str, str], ...] = (
    ("lat", "-lat"),
    ("lon", "-lon"),
    ("zoom", "-z"),
    ("tilt", "-t"),
    ("rot", "-r"),
    ("width", "-w"),
    ("height", "-h"),
    ("scene", "-s"),
)

NUMERIC_PARAMETERS: Tuple[str, ...] = ("lat", "lon", "zoom", "tilt", "rot", "width", "height")

OUTPUT_FLAG = "-o"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Rendering Models
class RenderParameters(BaseModel):
    """Validated camera and scene parameters for one render."""

    model_config = ConfigDict(frozen=True)

    lat: Optional[float] = Field(None, description="Latitude")
    lon: Optional[float] = Field(None, description="Longitude")
    zoom: Optional[float] = Field(None, description="Zoom level")
    tilt: Optional[float] = Field(None, description="Camera tilt")
    rot: Optional[float] = Field(None, description="Camera rotation")
    width: Optional[float] = Field(None, description="Output width")
    height: Optional[float] = Field(None, description="Output height")
    scene: Optional[str] = Field(None, description="Scene identifier")

    def present(self) -> Iterator[Tuple[str, Any]]:
        """Yield (name, value) for every set parameter in canonical order."""
        for name, _ in PARAMETER_FLAGS:
            value = getattr(self, name)
            if value is not None:
                yield name, value

    def is_empty(self) -> bool:
        return next(self.present(), None) is None


class RenderCommand(BaseModel):
    """Argument vector for one renderer invocation."""

    model_config = ConfigDict(frozen=True)

    argv: Tuple[str, ...] = Field(..., min_length=1, description="Program and arguments")
    output_path: Path = Field(..., description="File the renderer writes to")

    @property
    def program(self) -> str:
        return self.argv[0]

    @property
    def arguments(self) -> Tuple[str, ...]:
        return self.argv[1:]


# Health Check Models
class HealthStatus(BaseModel):
    """Health check status."""

    status: Literal["healthy", "degraded"] = Field(..., description="Overall status")
    timestamp: datetime = Field(default_factory=_utcnow, description="Check timestamp")
    version: str = Field(..., description="Application version")

    renderer: str = Field(..., description="Configured renderer executable")
    renderer_available: bool = Field(..., description="Whether the renderer executable resolves")
    platform: str = Field(..., description="Detected platform")

    active_renders: int = Field(0, ge=0, description="Renders currently running")
    queued_renders: int = Field(0, ge=0, description="Requests waiting for a render slot")


# Error Models
class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str = Field(..., description="Error message")
    error_code: Optional[str] = Field(None, description="Error code")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(default_factory=_utcnow, description="Error timestamp")
    request_id: Optional[str] = Field(None, description="Request identifier for tracking")
