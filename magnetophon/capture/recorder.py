"""
Sound-device input stream.

The PortAudio callback thread only copies each block into a queue; the
consuming thread owns all detection and baseline state. Import this module
only where an audio device is actually needed: sounddevice loads PortAudio
at import time.
"""

from __future__ import annotations

import logging
import queue
from datetime import datetime
from typing import Iterator, Optional, Tuple

import numpy as np
import sounddevice as sd

from magnetophon.core.config import CaptureConfig
from magnetophon.core.exceptions import CaptureError

logger = logging.getLogger(__name__)


class SoundDeviceRecorder:
    """
    Mono 16-bit input stream delivering (timestamp, block) pairs.

    Usage:
        with SoundDeviceRecorder(settings) as recorder:
            for timestamp, block in recorder.blocks():
                ...
    """

    def __init__(self, settings: CaptureConfig, device: Optional[int] = None):
        self.settings = settings
        self.device = device
        self._queue: "queue.Queue[Tuple[datetime, np.ndarray]]" = queue.Queue()
        self._stream: Optional[sd.InputStream] = None

    def _callback(self, indata, frames, time_info, status) -> None:
        if status:
            logger.warning("Audio input status: %s", status)
        self._queue.put((datetime.now(), indata[:, 0].copy()))

    def __enter__(self) -> "SoundDeviceRecorder":
        blocksize = int(self.settings.sample_rate * self.settings.block_seconds)
        try:
            self._stream = sd.InputStream(
                samplerate=self.settings.sample_rate,
                blocksize=blocksize,
                channels=1,
                dtype="int16",
                device=self.device,
                callback=self._callback,
            )
            self._stream.start()
        except sd.PortAudioError as e:
            raise CaptureError(f"Can't open audio input: {e}") from e

        logger.info(
            "Listening at %d Hz in %.2fs blocks (RMS threshold %g)",
            self.settings.sample_rate,
            self.settings.block_seconds,
            self.settings.rms_threshold,
        )
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None

    def blocks(self) -> Iterator[Tuple[datetime, np.ndarray]]:
        while self._stream is not None:
            yield self._queue.get()
