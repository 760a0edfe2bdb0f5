"""
Schema definitions for trigger decisions and per-event records.

Each processed interval yields one EventRecord carrying the business value,
the estimate and bucket means it was compared against, and the resulting
trigger state, so notifications can be audited from the event log alone.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from magnetophon.baseline.schema import LABEL_FORMAT, EstimateSource

EVENT_LOG_COLUMNS = [
    "datetime",
    "seconds_off",
    "seconds_on",
    "business",
    "interpolated_mean",
    "interpolated_stdev",
    "triggered",
    "a_mean",
    "b_mean",
    "o_mean",
    "threshold",
]


class TriggerDecision(BaseModel):
    """
    Result of one trigger evaluation.

    Fields:
    - threshold: calibrated notification threshold for this estimate
    - z_score: inverse-normal multiplier used for the threshold
    - triggered: trigger state after the evaluation
    - fired: True only on the transition from armed to triggered
    """

    threshold: float
    z_score: float
    triggered: bool
    fired: bool


class EventRecord(BaseModel):
    """
    Per-event log record.

    Fields:
    - start_time/label: when the interval started and its recording name
    - seconds_off/seconds_on: silence before and duration of the activity
    - business: business value after the update
    - interpolated_mean/interpolated_stdev: estimate used for the decision
    - a_mean/b_mean: primary and neighbor bucket means (b_mean is the overall
      mean when the estimator has no neighbor)
    - o_mean: overall mean
    - threshold, triggered, fired: trigger outcome
    - estimate_source: primary, overall or sentinel
    """

    start_time: datetime
    label: str
    seconds_off: int
    seconds_on: int
    business: float
    interpolated_mean: float
    interpolated_stdev: float
    triggered: bool
    fired: bool
    a_mean: float
    b_mean: float
    o_mean: float
    threshold: float
    estimate_source: EstimateSource

    def csv_row(self) -> List[object]:
        return [
            self.start_time.strftime(LABEL_FORMAT),
            self.seconds_off,
            self.seconds_on,
            f"{self.business:g}",
            f"{self.interpolated_mean:g}",
            f"{self.interpolated_stdev:g}",
            1 if self.triggered else 0,
            f"{self.a_mean:g}",
            f"{self.b_mean:g}",
            f"{self.o_mean:g}",
            f"{self.threshold:g}",
        ]


class ProcessResult(BaseModel):
    """
    Outcome of processing one interval: the record and whether to notify.
    """

    record: EventRecord
    notify: bool
    notable: Optional[str] = None
