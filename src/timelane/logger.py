"""Logging configuration for Timelane with custom verbosity levels."""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

# Custom levels between the standard ones
CHANGES_LEVEL = 25  # Between INFO (20) and WARNING (30) - lane moves
CHECKS_LEVEL = 15  # Between DEBUG (10) and INFO (20) - candidate checks

logging.addLevelName(CHANGES_LEVEL, "CHANGES")
logging.addLevelName(CHECKS_LEVEL, "CHECKS")

VERBOSITY_SILENT = 0  # Only errors
VERBOSITY_CHANGES = 1  # Passes and tracker moves
VERBOSITY_CHECKS = 2  # Every candidate considered
VERBOSITY_DEBUG = 3  # Full placement trace

_VERBOSITY_LEVELS = (logging.ERROR, CHANGES_LEVEL, CHECKS_LEVEL, logging.DEBUG)


class TimelaneLogger(logging.Logger):
    """Logger with semantic verbosity methods.

    - changes(): verbosity 1 - optimization passes and lane moves
    - checks(): verbosity 2 - candidate trackers and fit checks
    - debug(): verbosity 3 - every greedy placement
    """

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log changes (verbosity level 1)."""
        if self.isEnabledFor(CHANGES_LEVEL):
            self._log(CHANGES_LEVEL, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log checks (verbosity level 2)."""
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, msg, args, **kwargs)


def get_logger() -> TimelaneLogger:
    """Get the timelane logger instance (singleton).

    Use setup_logger() to configure it before first use.
    """
    logging.setLoggerClass(TimelaneLogger)
    logger = logging.getLogger("timelane")
    assert isinstance(logger, TimelaneLogger)
    return logger


def level_for_verbosity(verbosity: int) -> int:
    """Logging level for a CLI verbosity; values above 3 mean debug."""
    return _VERBOSITY_LEVELS[max(VERBOSITY_SILENT, min(verbosity, VERBOSITY_DEBUG))]


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Configure the timelane logger with a verbosity level.

    Can be called multiple times to reconfigure the logger.

    Args:
        verbosity: 0=silent (errors only), 1=changes, 2=checks, 3=debug
        stream: Optional output stream (defaults to sys.stderr)
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(level_for_verbosity(verbosity))

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Reset the logger to a clean state (used by tests)."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.ERROR)


def changes_enabled() -> bool:
    """Check if changes-level logging is enabled (verbosity >= 1)."""
    return get_logger().isEnabledFor(CHANGES_LEVEL)


def checks_enabled() -> bool:
    """Check if checks-level logging is enabled (verbosity >= 2)."""
    return get_logger().isEnabledFor(CHECKS_LEVEL)


def debug_enabled() -> bool:
    """Check if debug-level logging is enabled (verbosity >= 3)."""
    return get_logger().isEnabledFor(logging.DEBUG)
