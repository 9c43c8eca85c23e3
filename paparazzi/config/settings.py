"""
Application Settings
===================

Main application settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import Optional, List, Union
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json
from pathlib import Path


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="Paparazzi Render Server", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")

    # Renderer Configuration
    renderer_binary: str = Field(
        default="build/bin/paparazzi", description="Path to the renderer executable"
    )
    renderer_workdir: Optional[Path] = Field(
        default=None, description="Working directory for renderer processes"
    )
    render_timeout: float = Field(default=60.0, gt=0, description="Render timeout in seconds")

    # Storage Configuration
    temp_path: Path = Field(default=Path("./tmp"), description="Render output directory")
    log_path: Path = Field(default=Path("./logs"), description="Log file directory")

    # Admission Control
    max_concurrent_renders: int = Field(
        default=2, ge=1, description="Renderer processes allowed to run at once"
    )
    max_queued_renders: int = Field(
        default=8, ge=0, description="Requests allowed to wait for a free render slot"
    )
    disconnect_poll_interval: float = Field(
        default=0.5, gt=0, description="Client disconnect polling interval in seconds"
    )

    # Parameter Validation
    strict_parameters: bool = Field(
        default=False, description="Reject requests with malformed parameters instead of dropping them"
    )
    max_scene_length: int = Field(default=1024, ge=1, description="Maximum scene token length")

    # Platform Detection
    os_release_path: Path = Field(
        default=Path("/etc/os-release"), description="File inspected to detect the host platform"
    )
    headless_display: str = Field(default=":0", description="X display used on headless GPU hosts")
    headless_port: int = Field(default=80, description="Listen port on headless GPU hosts")

    # Security Configuration
    allowed_hosts: List[str] = Field(default=["*"], description="Allowed origins for CORS")

    # Monitoring Configuration
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("allowed_hosts", mode="before")
    @classmethod
    def parse_allowed_hosts(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse allowed hosts from string or list."""
        if isinstance(v, str):
            # Handle JSON-like string: ["*"] or ["host1", "host2"]
            v = v.strip()
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            # Handle comma-separated string: "*" or "host1,host2"
            return [host.strip() for host in v.split(",") if host.strip()]
        return v

    @field_validator("temp_path", "log_path")
    @classmethod
    def create_directories(cls, v: Path) -> Path:
        """Ensure directories exist."""
        v.mkdir(parents=True, exist_ok=True)
        return v

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="PAPARAZZI_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings
