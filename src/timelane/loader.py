"""Tracker file loading and validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from . import context
from .config import CONFIG_FILENAME, TimelaneConfig, load_config
from .exceptions import ParseError, ValidationError
from .models import Tracker
from .schemas import TrackerFileSchema


def discover_config(
    trackers_path: Path | str | None = None,
    config_path: Path | None = None,
) -> TimelaneConfig | None:
    """Find and load the configuration file.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. Tracker file directory / timelane_config.yaml
    4. Current directory / timelane_config.yaml
    """
    if config_path and config_path.exists():
        return load_config(config_path)

    ctx_config = context.get_config_path()
    if ctx_config and ctx_config.exists():
        return load_config(ctx_config)

    if trackers_path is not None:
        dir_config = Path(trackers_path).parent / CONFIG_FILENAME
        if dir_config.exists():
            return load_config(dir_config)

    cwd_config = Path(CONFIG_FILENAME)
    if cwd_config.exists():
        return load_config(cwd_config)

    return None


def parse_trackers(data: dict[str, Any]) -> list[Tracker]:
    """Validate raw tracker data and convert it to Tracker values."""
    try:
        schema = TrackerFileSchema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid tracker data: {e}") from e

    trackers: list[Tracker] = []
    seen: set[str] = set()
    for entry in schema.trackers:
        if entry.id in seen:
            raise ValidationError(f"Duplicate tracker id '{entry.id}'")
        seen.add(entry.id)
        trackers.append(
            Tracker(
                id=entry.id,
                title=entry.title,
                type=entry.type,
                start_date=entry.start_date,
                end_date=entry.end_date,
                priority=entry.priority,
                status=entry.status,
            )
        )
    return trackers


def load_trackers(path: Path | str) -> list[Tracker]:
    """Load trackers from a YAML file.

    Raises:
        ParseError: If the file is missing, is not valid YAML or has no mapping root
        ValidationError: If tracker entries are malformed or ids repeat
    """
    path = Path(path)
    if not path.exists():
        raise ParseError(f"File not found: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError(f"Failed to parse YAML: {e}") from e

    if not isinstance(data, dict):
        raise ParseError("YAML must contain a dictionary at the root level")

    return parse_trackers(data)  # type: ignore[arg-type]
