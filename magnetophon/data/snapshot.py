"""
Binary snapshot of the baseline curve.

The curve is stored as a numpy archive holding a (49, 3) array of
(count, mean, sum of squared deviations) rows (overall, weekday hours 0-23,
weekend hours 0-23), the local time of the last interval it covers, and the
business scale (recurrence policy and metric) the samples were produced with.
Writes go to a temporary file that is atomically moved into place, so a
killed process leaves either the previous or the new snapshot.
"""

from __future__ import annotations

import logging
import os
import tempfile
import zipfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import numpy as np

from magnetophon.baseline.curve import BaselineBusinessCurve
from magnetophon.core.exceptions import DataValidationError, PersistenceError

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    curve: BaselineBusinessCurve
    as_of: datetime
    scale: str = ""


class SnapshotStore:
    """
    Loads and saves BaselineBusinessCurve snapshots.

    Args:
        filepath: Snapshot archive location
        scale: Business scale of the running recurrence. When set, snapshots
            written under another scale are not loaded.
    """

    def __init__(self, filepath: Union[str, Path], scale: Optional[str] = None):
        self.filepath = Path(filepath)
        self.scale = scale

    def save(self, curve: BaselineBusinessCurve, as_of: datetime) -> None:
        directory = self.filepath.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=directory, prefix=self.filepath.name, suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    np.savez(
                        f,
                        stats=curve.to_array(),
                        as_of=np.float64(as_of.timestamp()),
                        scale=np.str_(self.scale or ""),
                    )
                os.replace(tmp_name, self.filepath)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Can't write snapshot {self.filepath}: {e}") from e

        logger.debug("Saved baseline snapshot (%d samples) to %s", curve.overall.count(), self.filepath)

    def load(self) -> Optional[Snapshot]:
        """
        Load the snapshot if present.

        A missing, unreadable or malformed snapshot is not an error: it is
        logged and None is returned so the caller starts from an empty curve.
        The same applies to a snapshot built under a different business
        scale, whose samples can't be mixed with the running recurrence.
        """
        if not self.filepath.exists():
            logger.info("No baseline snapshot at %s; starting with an empty baseline", self.filepath)
            return None

        try:
            with np.load(self.filepath) as archive:
                stats = archive["stats"]
                as_of = datetime.fromtimestamp(float(archive["as_of"]))
                scale = str(archive["scale"]) if "scale" in archive.files else ""
            curve = BaselineBusinessCurve.from_array(stats)
        except (OSError, KeyError, ValueError, zipfile.BadZipFile, DataValidationError) as e:
            logger.warning("Ignoring unreadable baseline snapshot %s: %s", self.filepath, e)
            return None

        if self.scale is not None and scale != self.scale:
            logger.warning(
                "Ignoring baseline snapshot %s built with %r business, running %r",
                self.filepath,
                scale or "unknown",
                self.scale,
            )
            return None

        logger.info(
            "Loaded baseline snapshot as of %s (%d samples)", as_of, curve.overall.count()
        )
        return Snapshot(curve=curve, as_of=as_of, scale=scale)
