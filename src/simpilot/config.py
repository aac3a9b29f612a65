"""
Runtime configuration for simpilot.

Settings come from environment variables with the ``SIMPILOT_`` prefix,
optionally layered over a YAML file. Environment variables win over the
file, and the file wins over the defaults.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger(__name__)

ENV_PREFIX = "SIMPILOT_"

STANDARD_CONFIG_PATHS: tuple[Path, ...] = (
    Path(".simpilot/config.yaml"),
    Path(".simpilot/config.yml"),
    Path("simpilot.yaml"),
    Path("simpilot.yml"),
)


class SimpilotSettings(BaseSettings):
    """Process-wide settings for the orchestrator, idb backend and HTTP API."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Orchestrator
    history_limit: int = Field(default=1000, ge=1, le=1_000_000)
    default_timeout_ms: int = Field(default=30000, ge=100, le=3_600_000)
    default_retries: int = Field(default=1, ge=0, le=10)

    # Backend adapter policy
    enforce_timeouts: bool = False
    enforce_retries: bool = False
    retry_delay_ms: int = Field(default=500, ge=0, le=30000)

    # idb backend
    idb_path: str = "idb"
    xcrun_path: str = "xcrun"
    boot_poll_attempts: int = Field(default=30, ge=1, le=600)
    boot_poll_interval_s: float = Field(default=1.0, ge=0.0, le=60.0)

    # HTTP API
    api_host: str = "127.0.0.1"
    api_port: int = Field(default=8000, ge=1, le=65535)
    cors_origins: str = Field(default="*", description="Comma separated list of allowed origins")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def join_origins(cls, v: Any) -> Any:
        if isinstance(v, list | tuple):
            return ",".join(str(origin) for origin in v)
        return v

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def _read_yaml(path: Path) -> dict[str, Any]:
    with path.open() as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def load_settings(config_file: Path | str | None = None) -> SimpilotSettings:
    """
    Load settings from an optional YAML file and the environment.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file (``config_file``, else the first standard location found)
    3. Defaults

    Args:
        config_file: Optional path to a YAML config file

    Returns:
        Validated SimpilotSettings instance
    """
    file_config: dict[str, Any] = {}
    source: Path | None = None

    if config_file:
        config_path = Path(config_file)
        if config_path.exists():
            file_config = _read_yaml(config_path)
            source = config_path
        else:
            logger.warning("Config file not found", path=str(config_path))

    if source is None:
        for path in STANDARD_CONFIG_PATHS:
            if path.exists():
                file_config = _read_yaml(path)
                source = path
                break

    environ = {key.upper() for key in os.environ}
    overrides = {
        key: value
        for key, value in file_config.items()
        if f"{ENV_PREFIX}{key}".upper() not in environ
    }

    if source is not None:
        logger.debug("Loaded config file", path=str(source), keys=sorted(file_config))

    return SimpilotSettings(**overrides)
