"""Custom exceptions for Timelane."""


class TimelaneError(Exception):
    """Base exception for all Timelane errors."""

    pass


class ValidationError(TimelaneError):
    """Raised when tracker or configuration data fails validation."""

    pass


class ParseError(TimelaneError):
    """Raised when YAML parsing fails."""

    pass


class ResizeStateError(TimelaneError):
    """Raised when a resize gesture is driven out of order."""

    pass
