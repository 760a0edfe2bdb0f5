"""
Custom exceptions for the Magnetophon activity monitor.

These exceptions provide clear error semantics across the system.
Use them to distinguish between bad input, persistence problems and
collaborator failures.
"""


class MagnetophonError(Exception):
    """Base exception for monitor failures."""
    pass


class BaselineError(MagnetophonError):
    """Raised when a baseline bucket is addressed out of range."""
    pass


class DataValidationError(MagnetophonError):
    """Raised when an interval record or snapshot fails validation."""
    pass


class PersistenceError(MagnetophonError):
    """Raised when a snapshot or baseline dump cannot be written."""
    pass


class NotificationError(MagnetophonError):
    """Raised when the notification collaborator cannot be launched."""
    pass


class CaptureError(MagnetophonError):
    """Raised when the audio input or recording file fails."""
    pass


class ConfigurationError(MagnetophonError):
    """Raised when configuration is invalid or names an unknown policy."""
    pass
