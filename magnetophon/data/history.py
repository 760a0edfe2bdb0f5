"""
CSV event log and historical replay.

Every processed interval is appended as one row. On startup the same file is
read back as a chronological sequence of ActivityInterval events so business
and the baseline can be rebuilt with the live recurrence.

Example:
    datetime,seconds_off,seconds_on,business,interpolated_mean,...
    2025-02-07 10.30.45,312,14,0.0213,0.0187,...

Only the first three fields are needed for replay. Malformed, short or
negative rows are logged and skipped; they never abort the replay.
"""

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Union

from pydantic import ValidationError

from magnetophon.anomaly.schema import EVENT_LOG_COLUMNS, EventRecord
from magnetophon.baseline.schema import LABEL_FORMAT, ActivityInterval
from magnetophon.core.exceptions import DataValidationError, PersistenceError

logger = logging.getLogger(__name__)


def parse_interval_row(row: List[str]) -> ActivityInterval:
    """
    Parse the leading (datetime, seconds_off, seconds_on) fields of a row.

    Raises:
        DataValidationError: If the row is short or a field does not parse
    """
    if len(row) < 3:
        raise DataValidationError(f"Expected at least 3 fields, got {len(row)}")

    stamp, seconds_off, seconds_on = (field.strip() for field in row[:3])
    try:
        start_time = datetime.strptime(stamp, LABEL_FORMAT)
        return ActivityInterval(
            start_time=start_time,
            seconds_off=int(seconds_off),
            seconds_on=int(seconds_on),
        )
    except (ValueError, ValidationError) as e:
        raise DataValidationError(f"Invalid interval row {row[:3]}: {e}") from e


class EventLog:
    """
    Append-only CSV log of processed intervals.
    """

    def __init__(self, filepath: Union[str, Path], encoding: str = "utf-8"):
        self.filepath = Path(filepath)
        self.encoding = encoding

    def ensure_exists(self) -> None:
        """Create the log with its header row if it does not yet exist."""
        if self.filepath.exists():
            return
        try:
            with open(self.filepath, "w", encoding=self.encoding, newline="") as f:
                csv.writer(f).writerow(EVENT_LOG_COLUMNS)
        except OSError as e:
            raise PersistenceError(f"Can't create {self.filepath}: {e}") from e

    def append(self, record: EventRecord) -> None:
        self.ensure_exists()
        try:
            with open(self.filepath, "a", encoding=self.encoding, newline="") as f:
                csv.writer(f).writerow(record.csv_row())
        except OSError as e:
            raise PersistenceError(f"Can't append to {self.filepath}: {e}") from e

    def replay(self) -> Iterator[ActivityInterval]:
        """
        Yield recorded intervals in file order.

        A missing file yields nothing. The header row is skipped.
        """
        if not self.filepath.exists():
            logger.warning(f"No event history at {self.filepath}; starting fresh")
            return

        skipped = 0
        with open(self.filepath, "r", encoding=self.encoding, newline="") as f:
            reader = csv.reader(f)
            next(reader, None)

            for line_num, row in enumerate(reader, start=2):
                if not row:
                    continue
                try:
                    yield parse_interval_row(row)
                except DataValidationError as e:
                    skipped += 1
                    logger.warning(f"Skipping {self.filepath} line {line_num}: {e}")

        if skipped:
            logger.warning(f"Skipped {skipped} malformed rows in {self.filepath}")
