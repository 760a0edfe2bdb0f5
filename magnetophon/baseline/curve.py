"""
Hour-of-day baseline of channel business.

Keeps one RunningStat per hour for weekdays and one per hour for weekends,
plus an overall accumulator. Weekday indices follow the C `tm_wday`
convention (0 = Sunday ... 6 = Saturday) so persisted history stays
comparable across tools.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List

import numpy as np
import pandas as pd

from magnetophon.core.exceptions import BaselineError, DataValidationError

from .running_stat import RunningStat
from .schema import HourSummary

HOURS_PER_DAY = 24
SUNDAY = 0
SATURDAY = 6

# overall + 24 weekday + 24 weekend rows of (n, m, s)
SNAPSHOT_SHAPE = (1 + 2 * HOURS_PER_DAY, 3)


def weekday_index(moment: datetime) -> int:
    """Sunday-based day index (0 = Sunday ... 6 = Saturday)."""
    return moment.isoweekday() % 7


def is_weekend(wday: int) -> bool:
    return wday in (SUNDAY, SATURDAY)


def _new_hours() -> List[RunningStat]:
    return [RunningStat() for _ in range(HOURS_PER_DAY)]


@dataclass
class BaselineBusinessCurve:
    """
    48 hourly accumulators (weekday and weekend) plus an overall one.
    """

    overall: RunningStat = field(default_factory=RunningStat)
    weekday: List[RunningStat] = field(default_factory=_new_hours)
    weekend: List[RunningStat] = field(default_factory=_new_hours)

    def hours(self, weekend: bool) -> List[RunningStat]:
        return self.weekend if weekend else self.weekday

    def bucket(self, wday: int, hour: int) -> RunningStat:
        if not 0 <= wday <= 6:
            raise BaselineError(f"Weekday index out of range: {wday}")
        if not 0 <= hour < HOURS_PER_DAY:
            raise BaselineError(f"Hour out of range: {hour}")
        return self.hours(is_weekend(wday))[hour]

    def push(self, x: float, wday: int, hour: int) -> RunningStat:
        """
        Record one business sample.

        Returns the hourly bucket that was written so the caller can read its
        statistics without a second lookup.
        """
        bucket = self.bucket(wday, hour)
        self.overall.push(x)
        bucket.push(x)
        return bucket

    def push_at(self, x: float, moment: datetime) -> RunningStat:
        return self.push(x, weekday_index(moment), moment.hour)

    def summary(self) -> List[HourSummary]:
        rows = []
        for hour in range(HOURS_PER_DAY):
            wd = self.weekday[hour]
            we = self.weekend[hour]
            rows.append(
                HourSummary(
                    hour=hour,
                    weekday_count=wd.count(),
                    weekday_mean=wd.mean(),
                    weekday_stdev=wd.stdev(),
                    weekend_count=we.count(),
                    weekend_mean=we.mean(),
                    weekend_stdev=we.stdev(),
                )
            )
        return rows

    def summary_frame(self) -> pd.DataFrame:
        return pd.DataFrame([row.model_dump() for row in self.summary()])

    def to_array(self) -> np.ndarray:
        stats = [self.overall, *self.weekday, *self.weekend]
        return np.array([s.state() for s in stats], dtype=np.float64)

    @classmethod
    def from_array(cls, data: np.ndarray) -> "BaselineBusinessCurve":
        data = np.asarray(data, dtype=np.float64)
        if data.shape != SNAPSHOT_SHAPE:
            raise DataValidationError(
                f"Baseline snapshot has shape {data.shape}, expected {SNAPSHOT_SHAPE}"
            )
        if not np.all(np.isfinite(data)):
            raise DataValidationError("Baseline snapshot contains non-finite values")
        stats = [RunningStat.from_state(*row) for row in data]
        return cls(
            overall=stats[0],
            weekday=stats[1 : 1 + HOURS_PER_DAY],
            weekend=stats[1 + HOURS_PER_DAY :],
        )
