"""
Level-gated transmission detector.

Consumes consecutive blocks of 16-bit PCM samples. A block whose sample
standard deviation exceeds the RMS threshold starts (or continues) a
transmission; the first quiet block after that ends it. Each completed
transmission becomes one ActivityInterval plus the recorded samples.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

import numpy as np

from magnetophon.baseline.schema import ActivityInterval

logger = logging.getLogger(__name__)


class DetectorState(str, Enum):
    WAITING = "waiting"
    RECORDING = "recording"


@dataclass
class Transmission:
    """A completed transmission and its audio."""

    interval: ActivityInterval
    samples: np.ndarray


def block_level(block: np.ndarray) -> float:
    """Sample standard deviation of a PCM block (RMS about its mean)."""
    block = np.asarray(block, dtype=np.float64).ravel()
    if block.size < 2:
        return 0.0
    return float(np.std(block, ddof=1))


@dataclass
class IntervalDetector:
    """
    Turns a block stream into delimited transmissions.

    Args:
        rms_threshold: level above which a block counts as activity
        sample_rate: samples per second, used to convert length to seconds
        started: time silence is measured from before the first transmission
    """

    rms_threshold: float
    sample_rate: int
    started: Optional[datetime] = None
    state: DetectorState = DetectorState.WAITING
    _start_time: Optional[datetime] = None
    _blocks: List[np.ndarray] = field(default_factory=list)
    _recorded: int = 0

    def __post_init__(self) -> None:
        self._silence_since = self.started or datetime.now()

    def feed(self, block: np.ndarray, timestamp: datetime) -> Optional[Transmission]:
        """
        Process one block captured at timestamp.

        Returns:
            The completed Transmission when this block ends one, else None
        """
        block = np.asarray(block).ravel()
        if block.size == 0:
            return None

        if block_level(block) > self.rms_threshold:
            if self.state == DetectorState.WAITING:
                self.state = DetectorState.RECORDING
                self._start_time = timestamp
                self._blocks = []
                self._recorded = 0
                logger.debug("Transmission started at %s", timestamp)
            self._blocks.append(block.copy())
            self._recorded += block.size
            return None

        if self.state == DetectorState.RECORDING:
            return self._finish(timestamp)
        return None

    def _finish(self, ended: datetime) -> Transmission:
        start = self._start_time
        seconds_off = max(int((start - self._silence_since).total_seconds()), 0)
        seconds_on = self._recorded // self.sample_rate

        transmission = Transmission(
            interval=ActivityInterval(
                start_time=start,
                seconds_off=seconds_off,
                seconds_on=seconds_on,
            ),
            samples=np.concatenate(self._blocks),
        )

        self.state = DetectorState.WAITING
        self._silence_since = ended
        self._start_time = None
        self._blocks = []
        self._recorded = 0
        return transmission
