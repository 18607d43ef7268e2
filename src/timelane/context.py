"""Process-wide state set by the CLI's global options."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass
class CliState:
    """Options given before the command name, e.g. ``timelane -c cfg.yaml assign``."""

    config_path: Path | None = None


_state = CliState()


def get_config_path() -> Path | None:
    """Config file given with ``--config``, if any."""
    return _state.config_path


def set_config_path(path: Path | None) -> None:
    _state.config_path = path


def reset() -> None:
    """Forget all CLI state (used by tests)."""
    _state.config_path = None
