"""
Capture module: level-gated transmission detection and recording files.

The sound-device stream lives in magnetophon.capture.recorder and is not
imported here, so detection can be used without an audio device.
"""

from .detector import DetectorState, IntervalDetector, Transmission, block_level
from .writer import RecordingWriter

__all__ = [
    "DetectorState",
    "IntervalDetector",
    "RecordingWriter",
    "Transmission",
    "block_level",
]
