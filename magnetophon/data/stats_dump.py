"""
Daily per-hour baseline dump.

Appends 24 rows (weekday and weekend count/mean/stdev per hour) to a CSV,
prefixed with the label of the interval that triggered the dump.
"""

import logging
from pathlib import Path
from typing import Union

from magnetophon.baseline.curve import BaselineBusinessCurve
from magnetophon.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class StatsDump:
    """
    Writes BaselineBusinessCurve summaries with pandas.
    """

    def __init__(self, filepath: Union[str, Path]):
        self.filepath = Path(filepath)

    def append(self, curve: BaselineBusinessCurve, label: str) -> None:
        frame = curve.summary_frame()
        frame.insert(0, "datetime", label)

        write_header = not self.filepath.exists()
        try:
            frame.to_csv(self.filepath, mode="a", header=write_header, index=False)
        except OSError as e:
            raise PersistenceError(f"Can't append to {self.filepath}: {e}") from e

        logger.info(f"Appended daily baseline summary to {self.filepath}")
