"""
Baseline module: online statistics of channel business.

Implements the running accumulator, the hourly weekday/weekend curve, the
business recurrences, and the expected-value estimators.
"""

from .activity import (
    ActivityModel,
    ActivityUpdate,
    EventSummaryRecurrence,
    Recurrence,
    ToggleDecayRecurrence,
    build_recurrence,
)
from .curve import BaselineBusinessCurve, is_weekend, weekday_index
from .estimators import (
    BaselineEstimator,
    NeighborInterpolationEstimator,
    SpectralSmoothingEstimator,
    build_estimator,
    low_pass,
    neighbor_bucket,
)
from .running_stat import RunningStat
from .schema import ActivityInterval, BaselineEstimate, EstimateSource, HourSummary

__all__ = [
    "ActivityInterval",
    "ActivityModel",
    "ActivityUpdate",
    "BaselineBusinessCurve",
    "BaselineEstimate",
    "BaselineEstimator",
    "EstimateSource",
    "EventSummaryRecurrence",
    "HourSummary",
    "NeighborInterpolationEstimator",
    "Recurrence",
    "RunningStat",
    "SpectralSmoothingEstimator",
    "ToggleDecayRecurrence",
    "build_estimator",
    "build_recurrence",
    "is_weekend",
    "low_pass",
    "neighbor_bucket",
    "weekday_index",
]
