"""
Recording writer: stores each transmission as an AIFF file named after its
start time ("%Y-%m-%d %H.%M.%S.aiff").
"""

import logging
from pathlib import Path
from typing import Union

import soundfile as sf

from magnetophon.core.exceptions import CaptureError

from .detector import Transmission

logger = logging.getLogger(__name__)

RECORDING_SUFFIX = ".aiff"


class RecordingWriter:
    def __init__(self, directory: Union[str, Path], sample_rate: int):
        self.directory = Path(directory)
        self.sample_rate = sample_rate

    def path_for(self, name: str) -> Path:
        return self.directory / f"{name}{RECORDING_SUFFIX}"

    def write(self, transmission: Transmission) -> Path:
        path = self.path_for(transmission.interval.name)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            sf.write(
                str(path),
                transmission.samples,
                self.sample_rate,
                format="AIFF",
                subtype="PCM_16",
            )
        except (OSError, RuntimeError) as e:
            raise CaptureError(f"Can't write recording {path}: {e}") from e

        logger.debug("Wrote %s", path)
        return path
