"""
Core module: Configuration, logging, and exception handling.
"""

from .config import Config, config
from .exceptions import (
    BaselineError,
    CaptureError,
    ConfigurationError,
    DataValidationError,
    MagnetophonError,
    NotificationError,
    PersistenceError,
)

__all__ = [
    "Config",
    "config",
    "MagnetophonError",
    "BaselineError",
    "CaptureError",
    "ConfigurationError",
    "DataValidationError",
    "NotificationError",
    "PersistenceError",
]
