"""
Schema definitions for the activity baseline.

Activity intervals are produced once per detected transmission and are
immutable. Estimates carry the bucket statistics they were derived from so
every notification decision can be audited later.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

LABEL_FORMAT = "%Y-%m-%d %H.%M.%S"


class ActivityInterval(BaseModel):
    """
    A single transmission as delimited by the capture front end.

    Fields:
    - start_time: local wall-clock time the activity started
    - seconds_off: silence since the previous transmission ended
    - seconds_on: duration of the activity
    - label: notable name of the recording (defaults to the start time)
    """

    model_config = ConfigDict(frozen=True)

    start_time: datetime
    seconds_off: int = Field(ge=0)
    seconds_on: int = Field(ge=0)
    label: Optional[str] = None

    @property
    def name(self) -> str:
        return self.label or self.start_time.strftime(LABEL_FORMAT)


class EstimateSource(str, Enum):
    """Where an expected mean/stdev came from."""

    PRIMARY = "primary"
    OVERALL = "overall"
    SENTINEL = "sentinel"


class BaselineEstimate(BaseModel):
    """
    Expected business level at a moment in time.

    Fields:
    - mean/stdev: expected value and spread
    - source: primary estimate or one of the fallbacks
    - method: estimator strategy that produced it
    - primary_mean: mean of the bucket containing the moment
    - neighbor_mean: mean of the interpolation neighbor (neighbor strategy only)
    """

    mean: float
    stdev: float
    source: EstimateSource
    method: str
    primary_mean: float
    neighbor_mean: Optional[float] = None

    @property
    def used_fallback(self) -> bool:
        return self.source != EstimateSource.PRIMARY


class HourSummary(BaseModel):
    """One row of the daily baseline dump."""

    hour: int = Field(ge=0, le=23)
    weekday_count: int
    weekday_mean: float
    weekday_stdev: float
    weekend_count: int
    weekend_mean: float
    weekend_stdev: float
