"""
Runtime service: wiring, notification and command-line entry point.
"""

from .notify import CommandNotifier
from .runner import MonitorService

__all__ = ["CommandNotifier", "MonitorService"]
