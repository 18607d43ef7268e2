"""Unified configuration loader (timelane_config.yaml)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .lanes import OptimizationConfig
from .resize import ResizeConstraints
from .viewport import ViewMode

CONFIG_FILENAME = "timelane_config.yaml"


class TimelaneConfig(BaseModel):
    """Top-level configuration."""

    view_mode: ViewMode = ViewMode.WEEKLY
    optimization: OptimizationConfig = Field(default_factory=OptimizationConfig)
    resize: ResizeConstraints = Field(default_factory=ResizeConstraints)


def load_config(config_path: Path | str) -> TimelaneConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to timelane_config.yaml

    Returns:
        TimelaneConfig, with defaults for omitted sections

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is malformed or has invalid values
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with config_path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config: {e}") from e

    if not data:
        raise ValueError("Empty configuration file")
    if not isinstance(data, dict):
        raise ValueError("Configuration must be a mapping")

    try:
        return TimelaneConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
