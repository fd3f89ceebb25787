"""
Configuration model and loader for the workspace capsule daemon.

The configuration is a YAML document read once at startup:

    background_colors:
      - "#89b4fa"
      - "#a6e3a1"
    focused_foreground_color: "#1e1e2e"
    minimum_workspace_count: 5
"""

import logging
from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from xdg import BaseDirectory

from .errors import ConfigError, ErrorCode

logger = logging.getLogger(__name__)

PACKAGE_NAME = "workspace-capsules"


class Config(BaseModel):
    """Static daemon configuration, immutable for the process lifetime."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    background_colors: List[str] = Field(
        ..., min_length=1, description="Cyclic capsule background palette"
    )
    focused_foreground_color: str = Field(..., description="Label colour of the focused workspace")
    minimum_workspace_count: int = Field(
        0, ge=0, description="Pad the bar with empty workspaces up to this ordinal"
    )
    version: Optional[str] = Field(None, description="Free-form configuration version")
    write_mode: Literal["append", "truncate"] = Field(
        "append", description="Append markup blocks or keep only the latest one"
    )

    @field_validator('background_colors')
    @classmethod
    def validate_colors(cls, v: List[str]) -> List[str]:
        """Reject blank palette entries."""
        stripped = [color.strip() for color in v]
        if any(not color for color in stripped):
            raise ValueError("Background colors cannot be empty")
        return stripped

    @field_validator('focused_foreground_color')
    @classmethod
    def validate_focused_color(cls, v: str) -> str:
        """Validate focused color is not empty."""
        if not v.strip():
            raise ValueError("Focused foreground color cannot be empty")
        return v.strip()


def default_config_path() -> Path:
    """Return ``$XDG_CONFIG_HOME/workspace-capsules/config``.

    Raises:
        ConfigError: If no config directory is available
    """
    if not BaseDirectory.xdg_config_home:
        raise ConfigError(
            "No config dir available",
            code=ErrorCode.CONFIG_DIR_UNAVAILABLE,
            suggestion="Set XDG_CONFIG_HOME or HOME, or pass --config",
        )
    return Path(BaseDirectory.xdg_config_home) / PACKAGE_NAME / "config"


def default_output_dir() -> Path:
    """Return ``$XDG_CACHE_HOME/workspace-capsules``.

    Raises:
        ConfigError: If no cache directory is available
    """
    if not BaseDirectory.xdg_cache_home:
        raise ConfigError(
            "No cache dir available for output files",
            code=ErrorCode.CACHE_DIR_UNAVAILABLE,
            suggestion="Set XDG_CACHE_HOME or HOME, or pass --output-dir",
        )
    return Path(BaseDirectory.xdg_cache_home) / PACKAGE_NAME


def load_config(path: Path) -> Config:
    """Load and validate configuration from a YAML file.

    Args:
        path: Path to the configuration file

    Returns:
        Validated Config

    Raises:
        ConfigError: If the file is missing, unreadable, or invalid
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(
            f"Configuration file not found: {path}",
            file_path=str(path),
            suggestion=f"Create {path} with background_colors and focused_foreground_color",
        )
    except OSError as e:
        raise ConfigError(f"Failed to read configuration from {path}: {e}", file_path=str(path))
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Failed to parse configuration from {path}: {e}",
            file_path=str(path),
            code=ErrorCode.CONFIG_INVALID,
        )

    if not isinstance(raw, dict):
        raise ConfigError(
            f"Configuration in {path} must be a mapping",
            file_path=str(path),
            code=ErrorCode.CONFIG_INVALID,
        )

    try:
        config = Config.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid configuration in {path}: {e}",
            file_path=str(path),
            code=ErrorCode.CONFIG_INVALID,
            suggestion="Check the required keys and their types",
        )

    logger.info(
        f"Loaded configuration from {path} "
        f"({len(config.background_colors)} colors, minimum {config.minimum_workspace_count} workspaces)"
    )
    if config.version:
        logger.debug(f"Configuration version: {config.version}")
    return config
